from __future__ import annotations

import pytest

from src.seminar_system.seminar_system.main import create_app
from tests.fakes import make_container, make_repos


@pytest.fixture()
def repos():
    return make_repos()


@pytest.fixture()
def container(repos, tmp_path):
    return make_container(tmp_path / "uploads", repos=repos)


@pytest.fixture()
def client(container):
    app = create_app("config.testing", container=container)
    return app.test_client()


def _token(container, email: str, role: str) -> str:
    result = container.auth_service.register(name=role.title(), email=email, password="secret123", role=role, allow_admin=True)
    return result["token"]


@pytest.fixture()
def admin_headers(container):
    return {"Authorization": f"Bearer {_token(container, 'admin@test.local', 'admin')}"}


@pytest.fixture()
def student_headers(container):
    return {"Authorization": f"Bearer {_token(container, 'student@test.local', 'student')}"}
