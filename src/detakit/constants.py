"""
Service endpoints and request limits shared by Base and Drive.
"""

DEFAULT_BASE_HOST = "https://database.deta.sh/v1"
DEFAULT_DRIVE_HOST = "https://drive.deta.sh/v1"
DEFAULT_TIMEOUT = 30.0

API_KEY_HEADER = "X-API-Key"


class ContentType:
    JSON = "application/json"
    OCTET_STREAM = "application/octet-stream"


# Base
MAX_PUT_ITEMS = 25
DEFAULT_QUERY_LIMIT = 1000
EXPIRES_FIELD = "__expires"

# Drive
MAX_CHUNK_SIZE = 10 * 1024 * 1024
MAX_DELETE_NAMES = 1000
DEFAULT_LIST_LIMIT = 1000
