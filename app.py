"""WSGI entry point.

    flask --app app run           (development)
    gunicorn app:app              (production)
"""

from src.seminar_system.seminar_system.main import create_app

app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=app.config["DEBUG"])
