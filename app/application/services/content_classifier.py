"""Content classifier: derive file name and extension from a URL and MIME type."""

from urllib.parse import urlsplit

from app.core.constants import DEFAULT_EXTENSION, MIME_EXTENSIONS
from app.shared.utils.datetime import now_ms


def extension_for_mime_type(content_type: str) -> str:
    """Map a MIME type (parameters ignored) to a file extension; unknown types map to 'bin'."""
    mime = (content_type or "").split(";", 1)[0].strip().lower()
    return MIME_EXTENSIONS.get(mime, DEFAULT_EXTENSION)


def classify(url: str, content_type: str, timestamp_ms: int | None = None) -> tuple[str, str]:
    """Return (file_name, extension) for a fetched URL.

    The name is the last path segment of the URL. An empty segment yields
    url_<unix_ms>.<ext>; a name without a dot gets .<ext> appended, with
    <ext> taken from the MIME table. The extension is always the lowercase
    suffix after the last dot of the final name.
    """
    path = urlsplit(url).path
    file_name = path.rsplit("/", 1)[-1].split("?", 1)[0]

    if not file_name:
        ts = now_ms() if timestamp_ms is None else timestamp_ms
        file_name = f"url_{ts}.{extension_for_mime_type(content_type)}"

    if "." not in file_name:
        file_name = f"{file_name}.{extension_for_mime_type(content_type)}"

    extension = file_name.rsplit(".", 1)[-1].lower()
    return file_name, extension
