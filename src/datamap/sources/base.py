"""Abstract base class for system record sources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from datamap.core.models import RawSystem


@dataclass
class Source(ABC):
    """Abstract base class for record sources.

    Sources read an export and return RawSystem records in file order.
    They do no normalization or deduplication; that is the pipeline's job.
    """

    name: str

    @abstractmethod
    def load(self) -> list[RawSystem]:
        """Read and return the raw records."""
        ...


@dataclass
class FileSource(Source):
    """A source backed by a single file on disk."""

    file_path: Path

    def validate(self) -> None:
        """Validate that the source file exists and is readable."""
        if not self.file_path.exists():
            msg = f"Source file not found: {self.file_path}"
            raise FileNotFoundError(msg)
        if not self.file_path.is_file():
            msg = f"Source path is not a file: {self.file_path}"
            raise ValueError(msg)


def expand_path(path: str | Path) -> Path:
    """Expand user home directory and resolve path."""
    return Path(path).expanduser().resolve()
