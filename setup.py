"""Packaging for BIMCall: ICS import, recurrence expansion and invitation export."""

from pathlib import Path

from setuptools import find_packages, setup

HERE = Path(__file__).parent


def read_requirements(path: Path) -> tuple[list[str], list[str]]:
    """Split requirements.txt into runtime and test (pytest*) requirements."""
    runtime: list[str] = []
    testing: list[str] = []
    if not path.exists():
        return runtime, testing

    for raw in path.read_text(encoding="utf-8").splitlines():
        requirement = raw.split("#", 1)[0].strip()
        if not requirement:
            continue
        (testing if requirement.startswith("pytest") else runtime).append(requirement)
    return runtime, testing


install_requires, tests_require = read_requirements(HERE / "requirements.txt")
readme = HERE / "README.md"

setup(
    name="bimcall",
    version="1.0.0",
    description="Calendar import and export for BIM coordination meetings",
    long_description=readme.read_text(encoding="utf-8") if readme.exists() else "",
    long_description_content_type="text/markdown",
    author="BIMCall Team",
    packages=find_packages(include=["bimcall", "bimcall.*"]),
    python_requires=">=3.9",
    install_requires=install_requires,
    extras_require={
        "test": tests_require,
        "dev": [*tests_require, "black>=23.0.0", "isort>=5.12.0", "mypy>=1.0.0"],
    },
    entry_points={"console_scripts": ["bimcall=bimcall.__main__:main"]},
    data_files=[("share/bimcall/config", ["config/config.yaml.example"])],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Framework :: AsyncIO",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Office/Business :: Scheduling",
    ],
    keywords="calendar ics icalendar rrule meetings bim coordination",
    zip_safe=False,
)
