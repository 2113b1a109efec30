from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ArchiveMaterial, NewMaterial, SeminarArchive
from .repository import ArchiveRepository

SNAPSHOT_FIELDS = (
    "original_seminar_id", "title", "speaker", "topic", "description", "date", "venue",
    "total_attendees", "average_rating", "recording_url", "archived_by",
)
UPDATABLE_FIELDS = ("total_attendees", "average_rating", "recording_url")

_SELECT = """
    SELECT a.archive_id, a.original_seminar_id, a.title, a.speaker, a.topic, a.description,
           a.date, a.venue, a.total_attendees, a.average_rating, a.recording_url,
           a.archived_at, a.archived_by, u.name AS archived_by_name
    FROM seminar_archives a
    LEFT JOIN users u ON u.user_id = a.archived_by
"""
_MATERIALS = """
    SELECT material_id, archive_id, filename, path, size, mimetype, uploaded_at
    FROM archive_materials
"""


def _row_to_material(r: dict) -> ArchiveMaterial:
    return ArchiveMaterial(
        material_id=int(r["material_id"]),
        archive_id=int(r["archive_id"]),
        filename=r["filename"],
        path=r["path"],
        size=int(r["size"]),
        mimetype=r["mimetype"],
        uploaded_at=r.get("uploaded_at"),
    )


def _row_to_archive(r: dict, materials: Sequence[ArchiveMaterial] = ()) -> SeminarArchive:
    return SeminarArchive(
        archive_id=int(r["archive_id"]),
        original_seminar_id=int(r["original_seminar_id"]),
        title=r["title"],
        speaker=r["speaker"],
        topic=r["topic"],
        description=r["description"],
        date=r.get("date"),
        venue=r.get("venue"),
        total_attendees=int(r.get("total_attendees") or 0),
        average_rating=float(r.get("average_rating") or 0),
        recording_url=r.get("recording_url") or "",
        archived_at=r.get("archived_at"),
        archived_by=r.get("archived_by"),
        archived_by_name=r.get("archived_by_name"),
        materials=tuple(materials),
    )


class MySQLArchiveRepository(ArchiveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _materials_for(self, cur, archive_ids: Sequence[int]) -> dict[int, list[ArchiveMaterial]]:
        grouped: dict[int, list[ArchiveMaterial]] = {i: [] for i in archive_ids}
        if not archive_ids:
            return grouped
        placeholders = ",".join(["%s"] * len(archive_ids))
        cur.execute(
            _MATERIALS + f" WHERE archive_id IN ({placeholders}) ORDER BY material_id",
            tuple(archive_ids),
        )
        for r in fetchall(cur):
            material = _row_to_material(r)
            grouped[material.archive_id].append(material)
        return grouped

    def _one(self, where: str, params: tuple) -> Optional[SeminarArchive]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + where, params)
            r = fetchone(cur)
            if not r:
                return None
            archive_id = int(r["archive_id"])
            return _row_to_archive(r, self._materials_for(cur, [archive_id])[archive_id])

    def get_by_id(self, archive_id: int) -> Optional[SeminarArchive]:
        return self._one(" WHERE a.archive_id=%s", (int(archive_id),))

    def get_by_seminar(self, seminar_id: int) -> Optional[SeminarArchive]:
        return self._one(" WHERE a.original_seminar_id=%s", (int(seminar_id),))

    def create(self, *, fields: Mapping[str, Any]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO seminar_archives({', '.join(SNAPSHOT_FIELDS)})
                VALUES({','.join(['%s'] * len(SNAPSHOT_FIELDS))})
                """,
                tuple(fields.get(f) for f in SNAPSHOT_FIELDS),
            )
            archive_id = int(cur.lastrowid)
            # same transaction: the snapshot never exists for a seminar left open
            cur.execute(
                "UPDATE seminars SET is_archived=1, archived_at=CURRENT_TIMESTAMP WHERE seminar_id=%s",
                (int(fields["original_seminar_id"]),),
            )
            return archive_id

    def list_all(self) -> Sequence[SeminarArchive]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY a.archived_at DESC, a.archive_id DESC")
            rows = fetchall(cur)
            materials = self._materials_for(cur, [int(r["archive_id"]) for r in rows])
            return [_row_to_archive(r, materials[int(r["archive_id"])]) for r in rows]

    def update(self, archive_id: int, *, fields: Mapping[str, Any]) -> bool:
        columns = [c for c in UPDATABLE_FIELDS if c in fields]
        with db_cursor(self._conn_factory) as (_, cur):
            if columns:
                cur.execute(
                    f"UPDATE seminar_archives SET {', '.join(f'{c}=%s' for c in columns)} WHERE archive_id=%s",
                    tuple(fields[c] for c in columns) + (int(archive_id),),
                )
            cur.execute("SELECT 1 AS found FROM seminar_archives WHERE archive_id=%s", (int(archive_id),))
            return fetchone(cur) is not None

    def delete(self, archive_id: int) -> bool:
        # archive_materials rows cascade
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM seminar_archives WHERE archive_id=%s", (int(archive_id),))
            return cur.rowcount > 0

    def add_materials(self, archive_id: int, materials: Sequence[NewMaterial]) -> list[ArchiveMaterial]:
        ids: list[int] = []
        with db_cursor(self._conn_factory) as (_, cur):
            for m in materials:
                cur.execute(
                    """
                    INSERT INTO archive_materials(archive_id, filename, path, size, mimetype)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (int(archive_id), m.filename, m.path, int(m.size), m.mimetype),
                )
                ids.append(int(cur.lastrowid))
            if not ids:
                return []
            placeholders = ",".join(["%s"] * len(ids))
            cur.execute(_MATERIALS + f" WHERE material_id IN ({placeholders}) ORDER BY material_id", tuple(ids))
            return [_row_to_material(r) for r in fetchall(cur)]

    def get_material(self, archive_id: int, material_id: int) -> Optional[ArchiveMaterial]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_MATERIALS + " WHERE archive_id=%s AND material_id=%s", (int(archive_id), int(material_id)))
            r = fetchone(cur)
            return _row_to_material(r) if r else None

    def delete_material(self, archive_id: int, material_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM archive_materials WHERE archive_id=%s AND material_id=%s",
                (int(archive_id), int(material_id)),
            )
            return cur.rowcount > 0

    def stats(self) -> dict:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS total_archives,
                       COALESCE(AVG(average_rating), 0) AS average_rating,
                       COALESCE(SUM(total_attendees), 0) AS total_attendees
                FROM seminar_archives
                """
            )
            row = fetchone(cur) or {}
            cur.execute("SELECT COUNT(*) AS total_materials FROM archive_materials")
            materials = fetchone(cur) or {}
            return {
                "total_archives": int(row.get("total_archives") or 0),
                "total_materials": int(materials.get("total_materials") or 0),
                "average_rating": float(row.get("average_rating") or 0),
                "total_attendees": int(row.get("total_attendees") or 0),
            }
