"""Result models for calendar imports."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ImportStatus(str, Enum):
    """Outcome of importing one calendar event."""

    IMPORTED = "imported"
    DUPLICATE = "duplicate"
    SYNCED = "synced"
    FAILED = "failed"


class EventAttendee(BaseModel):
    """Attendee attached to a calendar event being imported."""

    email: Optional[str] = None
    name: Optional[str] = None

    @property
    def display_name(self) -> str:
        """Name to store, falling back to the local part of the email."""
        if self.name:
            return self.name
        return (self.email or "").split("@")[0]


class ImportResult(BaseModel):
    """Outcome of importing one calendar event."""

    status: ImportStatus
    title: str
    entity_type: Optional[str] = Field(default=None, description="meeting or series")
    entity_id: Optional[str] = None
    occurrence_count: int = 0
    attendee_count: int = 0
    message: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)


class BulkImportSummary(BaseModel):
    """Counts and per-event results of a bulk import."""

    imported: int = 0
    duplicates: int = 0
    synced: int = 0
    failed: int = 0
    results: list[ImportResult] = Field(default_factory=list)

    def add(self, result: ImportResult) -> None:
        """Record one result and bump the matching counter."""
        self.results.append(result)
        if result.status == ImportStatus.IMPORTED:
            self.imported += 1
        elif result.status == ImportStatus.DUPLICATE:
            self.duplicates += 1
        elif result.status == ImportStatus.SYNCED:
            self.synced += 1
        else:
            self.failed += 1

    @property
    def message(self) -> str:
        """Human-readable summary line."""
        parts = [f"Imported {self.imported} event(s)."]
        if self.duplicates > 0:
            parts.append(f"{self.duplicates} already exist.")
        if self.synced > 0:
            parts.append(f"{self.synced} synced from calendar.")
        if self.failed > 0:
            parts.append(f"{self.failed} failed.")
        return " ".join(parts)
