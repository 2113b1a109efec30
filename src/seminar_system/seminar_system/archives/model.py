from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class ArchiveMaterial:
    material_id: int
    archive_id: int
    filename: str
    path: str
    size: int
    mimetype: str
    uploaded_at: Optional[datetime] = None


@dataclass(frozen=True)
class SeminarArchive:
    """Snapshot of a finished seminar plus its uploaded materials."""

    archive_id: int
    original_seminar_id: int
    title: str
    speaker: str
    topic: str
    description: str
    date: Optional[date] = None
    venue: Optional[str] = None
    total_attendees: int = 0
    average_rating: float = 0.0
    recording_url: str = ""
    archived_at: Optional[datetime] = None
    archived_by: Optional[int] = None
    archived_by_name: Optional[str] = None
    materials: tuple[ArchiveMaterial, ...] = ()


@dataclass(frozen=True)
class NewMaterial:
    filename: str
    path: str
    size: int
    mimetype: str
