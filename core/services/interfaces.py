"""Core service interfaces and shared data structures.

This module defines the status reporting protocol and the small result
dataclasses passed between the infrastructure and UI layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from core.models import Severity


class StatusReporter(Protocol):
    """Transient user-facing notification channel."""

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        """Show `message`, replacing whatever is currently shown."""
        ...


class DraftLoadStatus(str, Enum):
    """Outcome category of reading the stored draft."""

    EMPTY = "empty"
    LOADED = "loaded"
    CORRUPT = "corrupt"
    STORAGE_ERROR = "storage_error"


@dataclass
class DraftLoadResult:
    """Outcome of a draft load.

    Attributes:
        status: What happened.
        restored_ids: Tile ids whose fields were copied from the draft.
        message: Parse or storage error text when the load failed.
    """

    status: DraftLoadStatus
    restored_ids: list[str] = field(default_factory=list)
    message: str = ""


@dataclass
class ExportResult:
    """Outcome of an export.

    Attributes:
        document_path: Where featured.json was written.
        archive_path: Where featured-images.zip was written, if any images were packed.
        image_count: Number of images in the archive.
    """

    document_path: str
    archive_path: str | None = None
    image_count: int = 0
