"""Application settings: pydantic-settings defaults and environment, plus a YAML overlay.

Precedence, highest first: constructor arguments, ``BIMCALL_*`` environment
variables (nested fields via ``__``), the YAML file, field defaults.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional, cast

import yaml
from pydantic import BaseModel, Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "BIMCALL_"
CONFIG_FILENAME = "config.yaml"

# YAML key under the "api" section -> settings field
API_YAML_KEYS = {
    "base_url": "api_base_url",
    "token": "api_token",
    "dev_user_id": "dev_user_id",
    "dev_user_email": "dev_user_email",
    "request_timeout": "request_timeout",
    "max_retries": "max_retries",
    "retry_backoff_factor": "retry_backoff_factor",
}
TOP_LEVEL_YAML_KEYS = ("app_name", "max_ics_size_bytes")


class LoggingSettings(BaseModel):
    """Where log records go and how much detail each destination gets."""

    console_enabled: bool = Field(default=True, description="Log to stderr")
    console_level: str = Field(default="INFO", description="stderr threshold, VERBOSE allowed")
    console_colors: bool = Field(
        default=True, description="Color level names when stderr is a color terminal"
    )

    file_enabled: bool = Field(default=False, description="Also write a log file per run")
    file_level: str = Field(default="DEBUG", description="Log file threshold, VERBOSE allowed")
    file_directory: Optional[str] = Field(
        default=None, description="Log file directory; data_dir/logs when unset"
    )
    file_prefix: str = Field(default="bimcall", description="Log file name prefix")
    max_log_files: int = Field(default=5, description="Log files kept before the oldest go")
    include_function_names: bool = Field(
        default=True, description="Add function and line number to log file records"
    )

    third_party_level: str = Field(
        default="WARNING", description="Threshold for httpx, httpcore and asyncio"
    )


class ImportSettings(BaseModel):
    """Defaults applied when calendar events are imported as meetings."""

    project_id: Optional[str] = Field(default=None, description="Project to attach imports to")
    project_name: str = Field(
        default="Imported Meeting", description="Project label stored on imported meetings"
    )
    occurrence_count: int = Field(
        default=6, description="Occurrences generated for imported recurring events"
    )
    platform: str = Field(default="outlook", description="Meeting platform: outlook or gmail")
    default_location: str = Field(
        default="To be confirmed", description="Location used when the event has none"
    )
    fallback_start_time: str = Field(
        default="10:00", description="Start time used when DTSTART is missing"
    )
    fallback_end_time: str = Field(
        default="11:30", description="End time used when DTEND is missing"
    )
    check_duplicates: bool = Field(
        default=True, description="Skip events whose UID was already imported"
    )
    sync_duplicates: bool = Field(
        default=False, description="Sync already-imported events from the calendar instead"
    )


class BIMCallSettings(BaseSettings):
    """Application settings with environment variable and YAML support."""

    app_name: str = Field(default="BIMCall", description="Application name")

    # REST API
    api_base_url: str = Field(
        default="http://localhost:5000", description="Base URL of the BIMCall server"
    )
    api_token: Optional[str] = Field(default=None, description="Bearer token for the API")
    dev_user_id: Optional[str] = Field(default=None, description="Development user id header")
    dev_user_email: Optional[str] = Field(
        default=None, description="Development user email header"
    )
    request_timeout: int = Field(default=30, description="Read timeout per request, seconds")
    max_retries: int = Field(default=3, description="Retries after a network failure")
    retry_backoff_factor: float = Field(
        default=1.5, description="Retry n waits backoff_factor ** n seconds"
    )

    max_ics_size_bytes: int = Field(
        default=5 * 1024 * 1024, description="Largest calendar file accepted for import"
    )

    config_dir: Path = Field(default_factory=lambda: Path.home() / ".config" / "bimcall")
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".local" / "share" / "bimcall")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    importer: ImportSettings = Field(
        default_factory=ImportSettings, description="Calendar import defaults"
    )

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    _explicit_args: set[str] = PrivateAttr(default_factory=set)
    _env_vars_set: set[str] = PrivateAttr(default_factory=set)
    _config_path: Optional[Path] = PrivateAttr(default=None)

    def __init__(self, **kwargs: Any) -> None:
        config_path = kwargs.pop("_config_file", None)
        from_env = {
            name[len(ENV_PREFIX) :].lower() for name in os.environ if name.startswith(ENV_PREFIX)
        }

        super().__init__(**kwargs)

        self._explicit_args = set(kwargs)
        self._env_vars_set = from_env
        self._config_path = Path(config_path) if config_path else None
        self._load_yaml_config()

    def _config_candidates(self) -> list[Path]:
        """Files to try in order; an explicit --config path is the only candidate."""
        if self._config_path is not None:
            return [self._config_path]
        project_root = Path(__file__).resolve().parents[2]
        return [project_root / "config" / CONFIG_FILENAME, self.config_dir / CONFIG_FILENAME]

    def _yaml_may_set(self, field_name: str) -> bool:
        return field_name not in self._explicit_args and field_name not in self._env_vars_set

    def _apply_top_level(self, data: dict[str, Any]) -> None:
        api = data.get("api") or {}
        for yaml_key, field_name in API_YAML_KEYS.items():
            if yaml_key in api and self._yaml_may_set(field_name):
                setattr(self, field_name, api[yaml_key])

        for field_name in TOP_LEVEL_YAML_KEYS:
            if field_name in data and self._yaml_may_set(field_name):
                setattr(self, field_name, data[field_name])

    def _apply_section(self, field_name: str, section: Any) -> None:
        """Overlay a YAML section onto a nested settings model.

        Keys set through ``BIMCALL_<FIELD>__<KEY>`` keep their environment
        value, and a section passed to the constructor is left untouched.
        Values are validated, so YAML strings are coerced to the field types.
        """
        if not isinstance(section, dict) or not self._yaml_may_set(field_name):
            return

        target = cast(BaseModel, getattr(self, field_name))
        updates = {
            key: value
            for key, value in section.items()
            if key in type(target).model_fields
            and f"{field_name}__{key}" not in self._env_vars_set
        }
        if updates:
            merged = type(target).model_validate({**target.model_dump(), **updates})
            setattr(self, field_name, merged)

    def _load_yaml_config(self) -> None:
        """Overlay the first existing YAML config file, if any."""
        config_file = next((path for path in self._config_candidates() if path.exists()), None)
        if config_file is None:
            return

        try:
            data = yaml.safe_load(config_file.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            logging.getLogger(__name__).warning(f"Ignoring config file {config_file}: {e}")
            return

        if not isinstance(data, dict):
            return

        self._apply_top_level(data)
        self._apply_section("logging", data.get("logging"))
        self._apply_section("importer", data.get("import"))

    @property
    def config_file(self) -> Path:
        """Path to the user YAML configuration file."""
        return self.config_dir / CONFIG_FILENAME

    @property
    def log_dir(self) -> Path:
        """Directory for log files."""
        if self.logging.file_directory:
            return Path(self.logging.file_directory)
        return self.data_dir / "logs"


_settings_instance: Optional[BIMCallSettings] = None


def get_settings(config_file: Optional[str] = None) -> BIMCallSettings:
    """Return the process-wide settings, creating them on first use.

    Args:
        config_file: YAML file to load when the instance is created; ignored afterwards
    """
    if globals()["_settings_instance"] is None:
        globals()["_settings_instance"] = BIMCallSettings(_config_file=config_file)
    return cast(BIMCallSettings, globals()["_settings_instance"])


def reset_settings() -> None:
    """Forget the process-wide settings so the next get_settings() rebuilds them."""
    globals()["_settings_instance"] = None
