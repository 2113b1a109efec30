from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import ArchiveMaterial, NewMaterial, SeminarArchive


class ArchiveRepository(Protocol):
    def get_by_id(self, archive_id: int) -> Optional[SeminarArchive]:
        """Archive with its materials."""

        raise NotImplementedError

    def get_by_seminar(self, seminar_id: int) -> Optional[SeminarArchive]:
        raise NotImplementedError

    def create(self, *, fields: Mapping[str, Any]) -> int:
        """Store the snapshot; MySQL also marks the seminar archived in the same transaction.

        Raises DuplicateKeyError when the seminar already has an archive.
        """

        raise NotImplementedError

    def list_all(self) -> Sequence[SeminarArchive]:
        """Newest first, materials included."""

        raise NotImplementedError

    def update(self, archive_id: int, *, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, archive_id: int) -> bool:
        raise NotImplementedError

    def add_materials(self, archive_id: int, materials: Sequence[NewMaterial]) -> list[ArchiveMaterial]:
        raise NotImplementedError

    def get_material(self, archive_id: int, material_id: int) -> Optional[ArchiveMaterial]:
        raise NotImplementedError

    def delete_material(self, archive_id: int, material_id: int) -> bool:
        raise NotImplementedError

    def stats(self) -> dict:
        """total_archives, total_materials, average_rating, total_attendees."""

        raise NotImplementedError
