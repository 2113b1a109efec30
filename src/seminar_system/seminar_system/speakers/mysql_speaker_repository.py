from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Speaker
from .repository import SpeakerRepository

FIELDS = (
    "name", "email", "phone", "organization", "designation",
    "bio", "expertise", "experience", "linkedin", "website",
)
_COLUMNS = "speaker_id, " + ", ".join(FIELDS) + ", created_at"


def _row_to_speaker(row: dict) -> Speaker:
    return Speaker(
        speaker_id=int(row["speaker_id"]),
        name=row["name"],
        email=row["email"],
        organization=row["organization"],
        designation=row["designation"],
        bio=row["bio"],
        expertise=row["expertise"],
        experience=row["experience"],
        phone=row.get("phone"),
        linkedin=row.get("linkedin"),
        website=row.get("website"),
        created_at=row.get("created_at"),
    )


class MySQLSpeakerRepository(SpeakerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, speaker_id: int) -> Optional[Speaker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM speakers WHERE speaker_id=%s", (int(speaker_id),))
            row = fetchone(cur)
            return _row_to_speaker(row) if row else None

    def get_by_email(self, email: str) -> Optional[Speaker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM speakers WHERE email=%s", (email,))
            row = fetchone(cur)
            return _row_to_speaker(row) if row else None

    def list_all(self) -> Sequence[Speaker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM speakers ORDER BY created_at DESC, speaker_id DESC")
            return [_row_to_speaker(r) for r in fetchall(cur)]

    def create(self, *, fields: Mapping[str, Any]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO speakers({', '.join(FIELDS)}) VALUES({','.join(['%s'] * len(FIELDS))})",
                tuple(fields.get(f) for f in FIELDS),
            )
            return int(cur.lastrowid)

    def update(self, speaker_id: int, *, fields: Mapping[str, Any]) -> None:
        columns = [f for f in FIELDS if f in fields]
        if not columns:
            return
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE speakers SET {', '.join(f'{c}=%s' for c in columns)} WHERE speaker_id=%s",
                tuple(fields[c] for c in columns) + (int(speaker_id),),
            )

    def delete(self, speaker_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM speakers WHERE speaker_id=%s", (int(speaker_id),))
            return cur.rowcount > 0
