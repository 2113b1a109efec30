from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Sequence

from werkzeug.datastructures import FileStorage

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_int, require_max_length
from ..core.constants import ALLOWED_MATERIAL_EXTENSIONS, MAX_MATERIAL_BYTES, MAX_MATERIAL_FILES, MAX_URL_LENGTH
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..database.mysql_base import DuplicateKeyError
from ..seminars.repository import SeminarRepository
from .model import ArchiveMaterial, NewMaterial, SeminarArchive
from .repository import ArchiveRepository
from .storage import MaterialStorage, extension_of

logger = logging.getLogger(__name__)

ALREADY_ARCHIVED = "Seminar is already archived"
ARCHIVE_NOT_FOUND = "Archived seminar not found"


def _rating(value: Any) -> float:
    try:
        rating = float(value)
    except (TypeError, ValueError):
        raise ValidationError("averageRating must be a number")
    if rating < 0 or rating > 5:
        raise ValidationError("averageRating must be between 0 and 5")
    return round(rating, 2)


class ArchiveService:
    def __init__(
        self,
        archives: ArchiveRepository,
        seminars: SeminarRepository,
        storage: MaterialStorage,
        *,
        max_files: int = MAX_MATERIAL_FILES,
        max_bytes: int = MAX_MATERIAL_BYTES,
    ):
        self._archives = archives
        self._seminars = seminars
        self._storage = storage
        self._max_files = int(max_files)
        self._max_bytes = int(max_bytes)

    def archive(
        self,
        seminar_id: int,
        *,
        total_attendees: Any = None,
        average_rating: Any = None,
        recording_url: Optional[str] = None,
        archived_by: Optional[int] = None,
    ) -> SeminarArchive:
        seminar = self._seminars.get_by_id(int(seminar_id))
        if not seminar:
            raise NotFoundError("Seminar not found")
        existing = self._archives.get_by_seminar(seminar.seminar_id)
        if existing:
            if seminar.is_archived:
                raise ConflictError(ALREADY_ARCHIVED)
            # an earlier attempt stored the archive but never closed the seminar
            self._seminars.mark_archived(seminar.seminar_id, at=existing.archived_at or now_local())
            logger.warning("Completed archiving of seminar %s (archive %s)", seminar.seminar_id, existing.archive_id)
            return existing

        fields = {
            "original_seminar_id": seminar.seminar_id,
            "title": seminar.title,
            "speaker": seminar.speaker,
            "topic": seminar.topic,
            "description": seminar.description,
            "date": seminar.date,
            "venue": seminar.venue,
            "total_attendees": (
                seminar.registered_count
                if total_attendees in (None, "")
                else require_int(total_attendees, "totalAttendees", minimum=0)
            ),
            "average_rating": 0.0 if average_rating in (None, "") else _rating(average_rating),
            "recording_url": require_max_length(optional_text(recording_url), "recordingUrl", MAX_URL_LENGTH) or "",
            "archived_by": archived_by,
        }
        try:
            archive_id = self._archives.create(fields=fields)
        except DuplicateKeyError:
            raise ConflictError(ALREADY_ARCHIVED)

        self._seminars.mark_archived(seminar.seminar_id, at=now_local())
        logger.info("Seminar %s archived as %s", seminar.seminar_id, archive_id)
        return self.get(archive_id)

    def list_all(self) -> Sequence[SeminarArchive]:
        return self._archives.list_all()

    def get(self, archive_id: int) -> SeminarArchive:
        archive = self._archives.get_by_id(int(archive_id))
        if not archive:
            raise NotFoundError(ARCHIVE_NOT_FOUND)
        return archive

    def update(
        self,
        archive_id: int,
        *,
        total_attendees: Any = None,
        average_rating: Any = None,
        recording_url: Optional[str] = None,
    ) -> SeminarArchive:
        fields: dict = {}
        if total_attendees is not None:
            fields["total_attendees"] = require_int(total_attendees, "totalAttendees", minimum=0)
        if average_rating is not None:
            fields["average_rating"] = _rating(average_rating)
        if recording_url is not None:
            fields["recording_url"] = require_max_length(str(recording_url).strip(), "recordingUrl", MAX_URL_LENGTH)

        if not self._archives.update(int(archive_id), fields=fields):
            raise NotFoundError(ARCHIVE_NOT_FOUND)
        return self.get(archive_id)

    def delete(self, archive_id: int) -> None:
        archive = self.get(archive_id)
        for material in archive.materials:
            self._storage.remove(material.path)
        self._archives.delete(archive.archive_id)
        logger.info("Archive %s deleted with %d material(s)", archive.archive_id, len(archive.materials))

    def stats(self) -> dict:
        return self._archives.stats()

    def _check_uploads(self, uploads: list[FileStorage]) -> None:
        if not uploads:
            raise ValidationError("No files uploaded")
        if len(uploads) > self._max_files:
            raise ValidationError(f"At most {self._max_files} files can be uploaded at once")
        for upload in uploads:
            ext = extension_of(upload.filename or "").lstrip(".")
            if ext not in ALLOWED_MATERIAL_EXTENSIONS:
                raise ValidationError("Only documents, presentations, videos, audio, and images are allowed")

    def upload_materials(self, archive_id: int, uploads: Iterable[FileStorage]) -> list[ArchiveMaterial]:
        uploads = [u for u in uploads if u is not None and u.filename]
        self._check_uploads(uploads)
        archive = self.get(archive_id)

        saved: list[NewMaterial] = []
        try:
            for upload in uploads:
                stored = self._storage.save(upload)
                saved.append(
                    NewMaterial(
                        filename=upload.filename or "",
                        path=stored.path,
                        size=stored.size,
                        mimetype=upload.mimetype or "application/octet-stream",
                    )
                )
                if stored.size > self._max_bytes:
                    raise ValidationError(f"{upload.filename} exceeds the {self._max_bytes // (1024 * 1024)}MB limit")
            materials = self._archives.add_materials(archive.archive_id, saved)
        except Exception:
            # all-or-nothing: drop whatever already reached the disk
            for item in saved:
                self._storage.remove(item.path)
            raise

        logger.info("Uploaded %d material(s) to archive %s", len(materials), archive.archive_id)
        return materials

    def material(self, archive_id: int, material_id: int) -> ArchiveMaterial:
        self.get(archive_id)
        material = self._archives.get_material(int(archive_id), int(material_id))
        if not material:
            raise NotFoundError("Material not found")
        return material

    def material_for_download(self, archive_id: int, material_id: int) -> ArchiveMaterial:
        material = self.material(archive_id, material_id)
        if not self._storage.exists(material.path):
            raise NotFoundError("File not found on server")
        return material

    def delete_material(self, archive_id: int, material_id: int) -> None:
        material = self.material(archive_id, material_id)
        self._archives.delete_material(material.archive_id, material.material_id)
        self._storage.remove(material.path)
