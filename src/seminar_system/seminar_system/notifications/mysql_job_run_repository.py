from __future__ import annotations

from datetime import date

from ..database.connection import DatabaseConnection
from ..database.mysql_base import DuplicateKeyError, db_cursor
from .repository import JobRunRepository


class MySQLJobRunRepository(JobRunRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def claim(self, *, job_name: str, run_date: date) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("INSERT INTO job_runs(job_name, run_date) VALUES(%s,%s)", (job_name, run_date))
        except DuplicateKeyError:
            return False
        return True

    def release(self, *, job_name: str, run_date: date) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM job_runs WHERE job_name=%s AND run_date=%s", (job_name, run_date))
