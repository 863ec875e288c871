"""Destinations for the finished calendar document."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from rotation_calendar.logging import get_logger

log = get_logger(__name__)


class DocumentSink(Protocol):
    def write(self, document: str, filename: str, media_type: str) -> str:
        """Persist the document and return where it went."""
        ...


class FileDocumentSink:
    """Writes the document into a directory, keeping its CRLF line endings."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def write(self, document: str, filename: str, media_type: str) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / filename
        # newline="" so the CRLFs are written as-is on every platform
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(document)
        log.info("calendar_written", path=str(path), media_type=media_type)
        return str(path)


@dataclass
class StoredDocument:
    filename: str
    media_type: str
    content: str


@dataclass
class MemoryDocumentSink:
    """Keeps written documents in memory."""

    documents: list[StoredDocument] = field(default_factory=list)

    def write(self, document: str, filename: str, media_type: str) -> str:
        self.documents.append(StoredDocument(filename, media_type, document))
        return f"memory:{filename}"
