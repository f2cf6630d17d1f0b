import os

DB_PATH = os.environ.get("BOARD_DB_PATH", "board.db")
ALLOWED_ORIGINS = os.environ.get("ALLOWED_ORIGINS", "*").split(",")

# Server Configuration
DEFAULT_HOST = os.environ.get("HOST", "0.0.0.0")
DEFAULT_PORT = int(os.environ.get("PORT", "3000"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

# Board Views
RECENT_THREADS_LIMIT = 10
RECENT_REPLIES_LIMIT = 3
REDACTED_TEXT = "[deleted]"

# Acknowledgments
ACK_SUCCESS = "success"
ACK_REPORTED = "reported"
INCORRECT_PASSWORD = "incorrect password"

# Security Settings
MAX_REQUEST_SIZE_MB = 1
GZIP_MIN_SIZE = 1000

# HTTP Status Codes
HTTP_REQUEST_ENTITY_TOO_LARGE = 413
HTTP_INTERNAL_SERVER_ERROR = 500
