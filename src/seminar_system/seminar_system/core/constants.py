"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

CERTIFICATE_PREFIX = "SEMINEX"
CERTIFICATE_MAX_ATTEMPTS = 5

DEFAULT_DEPARTMENT = "General"
DEFAULT_TOKEN_DAYS = 7
DEFAULT_TREND_MONTHS = 12
MAX_TREND_MONTHS = 120

MIN_PASSWORD_LENGTH = 6
MIN_RATING = 1
MAX_RATING = 5

MAX_TITLE_LENGTH = 200
MAX_SPEAKER_LENGTH = 100
MAX_TOPIC_LENGTH = 150
MAX_DESCRIPTION_LENGTH = 1000
MAX_VENUE_LENGTH = 200
MAX_COMMENT_LENGTH = 1000

# column widths in database/schema.sql
MAX_NAME_LENGTH = 100
MAX_EMAIL_LENGTH = 255
MAX_STUDENT_ID_LENGTH = 100
MAX_DEPARTMENT_LENGTH = 100
MAX_TIME_LENGTH = 20
MAX_PHONE_LENGTH = 50
MAX_ORGANIZATION_LENGTH = 200
MAX_EXPERTISE_LENGTH = 500
MAX_URL_LENGTH = 500
MAX_BLOCK_REASON_LENGTH = 500

MAX_MATERIAL_FILES = 10
MAX_MATERIAL_BYTES = 50 * 1024 * 1024
ALLOWED_MATERIAL_EXTENSIONS = frozenset(
    {
        "pdf", "doc", "docx", "ppt", "pptx",
        "mp4", "mp3", "wav", "avi", "mov",
        "txt", "jpg", "jpeg", "png", "gif",
    }
)

JOB_TOMORROW_REMINDERS = "tomorrow_reminders"
JOB_FEEDBACK_REQUESTS = "feedback_requests"
