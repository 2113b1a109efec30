"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the rules live in the services.
"""

from config import load_settings

from src.seminar_system.seminar_system.common.serialization import to_json
from src.seminar_system.seminar_system.container import build_container


def main():
    settings = load_settings()
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)

    for seminar in container.seminar_service.list_seminars():
        print(to_json(container.seminar_service.capacity_status(seminar.seminar_id)))


if __name__ == "__main__":
    main()
