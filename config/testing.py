import os
import tempfile

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "seminar_test_db"),
    "connection_timeout": 2,
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
ADMIN_EMAIL = "admin@test.local"
ADMIN_PASSWORD = "admin123"

JWT_SECRET = "test-jwt-secret-with-at-least-32-bytes"
JWT_ALGORITHM = "HS256"
JWT_EXPIRES_DAYS = 7

MAIL_BACKEND = "console"
MAIL_FROM = "Seminex <no-reply@test.local>"
SEND_REGISTRATION_EMAILS = True
FRONTEND_URL = "http://localhost:5173"

UPLOAD_FOLDER = os.path.join(tempfile.gettempdir(), "seminar-system-test-uploads")
MAX_MATERIAL_FILES = 10
MAX_MATERIAL_BYTES = 50 * 1024 * 1024

CELERY_BROKER_URL = "memory://"
SCHEDULER_TIMEZONE = "Asia/Dhaka"
REMINDER_HOUR = 9
FEEDBACK_REQUEST_HOUR = 10

CORS_ORIGINS = "*"
