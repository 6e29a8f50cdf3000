"""Load seekers and job postings from a YAML data file.

Expected layout:

    seekers:
      - id: u-1
        name: Aline Uwase
        email: aline@example.rw
        skills: [Python, SQL]
        ...
    jobs:
      - id: job-1
        title: Junior Data Analyst
        skills: [SQL, Excel]
        ...

Each record is validated with the domain models; all errors are collected
and reported together.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import yaml
from pydantic import ValidationError

from emirimo.domain.models import JobPosting, SeekerProfile


class SeedDataError(ValueError):
    """Raised when a data file cannot be read or contains invalid records."""

    def __init__(self, message: str, errors: List[str] = None):
        self.message = message
        self.errors = errors or []
        super().__init__(self._format())

    def _format(self) -> str:
        lines = [self.message]
        for i, error in enumerate(self.errors, 1):
            lines.append(f"  {i}. {error}")
        return "\n".join(lines)


@dataclass
class SeedData:
    seekers: List[SeekerProfile] = field(default_factory=list)
    jobs: List[JobPosting] = field(default_factory=list)


def load_seed_file(path: Path) -> SeedData:
    """Parse and validate a YAML data file.

    Raises:
        SeedDataError: If the file is unreadable, malformed or has invalid records
    """
    try:
        with open(path, "r") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SeedDataError(f"Failed to parse YAML data file {path}: {e}") from e
    except OSError as e:
        raise SeedDataError(f"Failed to read data file {path}: {e}") from e

    if raw is None:
        return SeedData()
    if not isinstance(raw, dict):
        raise SeedDataError(f"Data file {path} must contain a mapping with 'seekers' and 'jobs'")

    data = SeedData()
    errors: List[str] = []

    for section, model, target in (
        ("seekers", SeekerProfile, data.seekers),
        ("jobs", JobPosting, data.jobs),
    ):
        for index, record in enumerate(raw.get(section) or []):
            try:
                target.append(model.model_validate(record))
            except ValidationError as e:
                for error in e.errors():
                    location = ".".join(str(loc) for loc in error["loc"])
                    errors.append(f"{section}[{index}].{location}: {error['msg']}")

    if errors:
        raise SeedDataError(f"Invalid records in {path}", errors=errors)

    return data
