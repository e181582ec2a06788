"""Core constants: ingestion limits, index key prefixes and MIME mapping.

Single source of truth for literal values shared by the fetcher, the
classifier, the adapters and the metadata index.
"""

# Remote fetch limits (the chat-bot relay accepts at most 20 MiB).
MAX_REMOTE_FILE_SIZE = 20 * 1024 * 1024
FETCH_TIMEOUT_SECONDS = 30.0

# Browser-like headers sent to origins; caller headers are never forwarded.
FETCH_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "image/*,video/*,audio/*,*/*",
}

DEFAULT_CONTENT_TYPE = "application/octet-stream"
DEFAULT_EXTENSION = "bin"

MIME_EXTENSIONS: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/bmp": "bmp",
    "image/svg+xml": "svg",
    "video/mp4": "mp4",
    "video/webm": "webm",
    "video/quicktime": "mov",
    "audio/mpeg": "mp3",
    "audio/wav": "wav",
    "audio/ogg": "ogg",
    "application/pdf": "pdf",
}

# Index key prefixes checked for a bare identifier, in priority order.
# img/vid/aud/doc were written by earlier versions and are read only.
INDEX_PROBE_PREFIXES: tuple[str, ...] = ("img:", "vid:", "aud:", "doc:", "r2:", "")

# Delimiter for composite keys
INDEX_KEY_SEP = ":"
GUEST_COUNTER_PREFIX = "guest"
GUEST_COUNTER_TTL_SECONDS = 24 * 60 * 60

# Cache-Control for file-info responses (1 hour).
FILE_INFO_MAX_AGE = 3600
