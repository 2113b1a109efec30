import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "seminar_db"),
    "connection_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "5")),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

JWT_SECRET = os.getenv("JWT_SECRET", SECRET_KEY)
JWT_ALGORITHM = "HS256"
JWT_EXPIRES_DAYS = int(os.getenv("JWT_EXPIRES_DAYS", "7"))

MAIL_BACKEND = os.getenv("MAIL_BACKEND", "smtp")
MAIL_FROM = os.getenv("MAIL_FROM", "Seminex <no-reply@seminex.local>")
SMTP_HOST = os.getenv("SMTP_HOST", "smtp.gmail.com")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
SMTP_USE_TLS = bool(int(os.getenv("SMTP_USE_TLS", "1")))
SMTP_TIMEOUT = float(os.getenv("SMTP_TIMEOUT", "10"))
SEND_REGISTRATION_EMAILS = bool(int(os.getenv("SEND_REGISTRATION_EMAILS", "1")))
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "/var/lib/seminar-system/uploads")
MAX_MATERIAL_FILES = int(os.getenv("MAX_MATERIAL_FILES", "10"))
MAX_MATERIAL_BYTES = int(os.getenv("MAX_MATERIAL_BYTES", str(50 * 1024 * 1024)))

CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
SCHEDULER_TIMEZONE = os.getenv("SCHEDULER_TIMEZONE", "Asia/Dhaka")
REMINDER_HOUR = int(os.getenv("REMINDER_HOUR", "9"))
FEEDBACK_REQUEST_HOUR = int(os.getenv("FEEDBACK_REQUEST_HOUR", "10"))

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
