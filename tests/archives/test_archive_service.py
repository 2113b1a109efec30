from __future__ import annotations

import io
from pathlib import Path

import pytest
from werkzeug.datastructures import FileStorage

from src.seminar_system.seminar_system.archives.service import ArchiveService
from src.seminar_system.seminar_system.archives.storage import MaterialStorage
from src.seminar_system.seminar_system.core.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from src.seminar_system.seminar_system.registrations.service import RegistrationService
from tests.fakes import add_registration, add_seminar, make_repos


def _upload(name: str, data: bytes = b"slides", mimetype: str = "application/pdf") -> FileStorage:
    return FileStorage(stream=io.BytesIO(data), filename=name, content_type=mimetype)


def _service(repos, tmp_path, **kwargs):
    return ArchiveService(repos.archives, repos.seminars, MaterialStorage(tmp_path), **kwargs)


def test_archive_snapshots_seminar_and_hides_it(tmp_path):
    repos = make_repos()
    seminar = add_seminar(repos, title="Compilers")
    add_registration(repos, seminar, "a@x.com")
    svc = _service(repos, tmp_path)

    archive = svc.archive(seminar.seminar_id, average_rating="4.25", archived_by=1)
    assert archive.title == "Compilers"
    assert archive.total_attendees == 1
    assert archive.average_rating == 4.25
    assert repos.seminars.list_seminars() == []

    with pytest.raises(ConflictError, match="already archived"):
        svc.archive(seminar.seminar_id)
    with pytest.raises(InvalidStateError):
        RegistrationService(repos.registrations, repos.seminars).register(
            seminar_id=seminar.seminar_id, name="B", email="b@x.com"
        )


def test_archive_validation(tmp_path):
    repos = make_repos()
    seminar = add_seminar(repos)
    svc = _service(repos, tmp_path)

    with pytest.raises(NotFoundError):
        svc.archive(404)
    with pytest.raises(ValidationError):
        svc.archive(seminar.seminar_id, average_rating=7)
    with pytest.raises(NotFoundError):
        svc.update(404, recording_url="https://video")


def test_upload_download_and_delete(tmp_path):
    repos = make_repos()
    seminar = add_seminar(repos)
    svc = _service(repos, tmp_path)
    archive = svc.archive(seminar.seminar_id)

    materials = svc.upload_materials(archive.archive_id, [_upload("slides.pdf"), _upload("talk.mp4", b"video")])
    assert [m.filename for m in materials] == ["slides.pdf", "talk.mp4"]
    assert all(Path(m.path).is_file() for m in materials)
    assert len(svc.get(archive.archive_id).materials) == 2

    first = materials[0]
    assert svc.material_for_download(archive.archive_id, first.material_id).size == len(b"slides")

    svc.delete_material(archive.archive_id, first.material_id)
    assert not Path(first.path).exists()
    with pytest.raises(NotFoundError):
        svc.material(archive.archive_id, first.material_id)

    # ids stay stable after a delete
    assert svc.material(archive.archive_id, materials[1].material_id).filename == "talk.mp4"

    svc.delete(archive.archive_id)
    assert not Path(materials[1].path).exists()
    with pytest.raises(NotFoundError):
        svc.get(archive.archive_id)


def test_upload_is_all_or_nothing(tmp_path):
    repos = make_repos()
    seminar = add_seminar(repos)
    svc = _service(repos, tmp_path, max_bytes=10, max_files=2)
    archive = svc.archive(seminar.seminar_id)

    with pytest.raises(ValidationError):
        svc.upload_materials(archive.archive_id, [_upload("slides.pdf"), _upload("virus.exe")])
    with pytest.raises(ValidationError):
        svc.upload_materials(archive.archive_id, [_upload("a.pdf"), _upload("b.pdf"), _upload("c.pdf")])
    with pytest.raises(ValidationError, match="exceeds"):
        svc.upload_materials(archive.archive_id, [_upload("ok.pdf"), _upload("big.pdf", b"x" * 11)])
    with pytest.raises(ValidationError, match="No files"):
        svc.upload_materials(archive.archive_id, [])

    assert svc.get(archive.archive_id).materials == ()
    stored = tmp_path / "archive"
    assert not stored.exists() or list(stored.iterdir()) == []


def test_missing_file_on_disk(tmp_path):
    repos = make_repos()
    seminar = add_seminar(repos)
    svc = _service(repos, tmp_path)
    archive = svc.archive(seminar.seminar_id)
    (material,) = svc.upload_materials(archive.archive_id, [_upload("notes.txt", b"hi", "text/plain")])
    Path(material.path).unlink()

    with pytest.raises(NotFoundError, match="File not found on server"):
        svc.material_for_download(archive.archive_id, material.material_id)
    # deleting the record still works when the file is already gone
    svc.delete_material(archive.archive_id, material.material_id)


def test_stats(tmp_path):
    repos = make_repos()
    svc = _service(repos, tmp_path)
    svc.archive(add_seminar(repos).seminar_id, average_rating=4, total_attendees=10)
    svc.archive(add_seminar(repos).seminar_id, average_rating=5, total_attendees=20)

    stats = svc.stats()
    assert stats["total_archives"] == 2
    assert stats["total_attendees"] == 30
    assert stats["average_rating"] == 4.5


def test_retry_completes_an_interrupted_archive(tmp_path, monkeypatch):
    repos = make_repos()
    seminar = add_seminar(repos)
    svc = _service(repos, tmp_path)
    mark_archived = repos.seminars.mark_archived
    calls = []

    def flaky_mark_archived(seminar_id, *, at):
        calls.append(seminar_id)
        if len(calls) == 1:
            raise RuntimeError("connection lost")
        return mark_archived(seminar_id, at=at)

    monkeypatch.setattr(repos.seminars, "mark_archived", flaky_mark_archived)

    with pytest.raises(RuntimeError):
        svc.archive(seminar.seminar_id)
    assert repos.archives.get_by_seminar(seminar.seminar_id) is not None
    assert repos.seminars.get_by_id(seminar.seminar_id).is_archived is False

    archive = svc.archive(seminar.seminar_id)
    assert archive.original_seminar_id == seminar.seminar_id
    assert repos.seminars.get_by_id(seminar.seminar_id).is_archived is True
    assert len(repos.archives.list_all()) == 1

    with pytest.raises(ConflictError, match="already archived"):
        svc.archive(seminar.seminar_id)


def test_recording_url_fits_its_column(tmp_path):
    repos = make_repos()
    seminar = add_seminar(repos)
    svc = _service(repos, tmp_path)

    with pytest.raises(ValidationError, match="recordingUrl"):
        svc.archive(seminar.seminar_id, recording_url="https://v/" + "x" * 500)
    archive = svc.archive(seminar.seminar_id, recording_url="https://video/1")
    with pytest.raises(ValidationError, match="recordingUrl"):
        svc.update(archive.archive_id, recording_url="https://v/" + "x" * 500)
