"""
Static file lookup for the HTTP server.

Maps a URL path to a file under a served root, guesses its content type and
reads its bytes. Three profiles reproduce the historical server variants:

- basic:    small MIME table, text/plain fallback
- extended: larger MIME table (fonts, media, wasm), octet-stream fallback,
            per-request logging
- express:  platform MIME registry, /game alias, directory index pages

Only two failure kinds exist: ResourceNotFound (HTTP 404) and
ResourceReadError (HTTP 500, carrying the symbolic errno name).
"""

import errno
import logging
import mimetypes
import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from werkzeug.security import safe_join

logger = logging.getLogger(__name__)

INDEX_FILE = "index.html"


class ResourceNotFound(Exception):
    """The requested path does not resolve to a file under the served root."""

    def __init__(self, path: str):
        super().__init__(f"File not found: {path}")
        self.path = path


class ResourceReadError(Exception):
    """Any other filesystem failure while reading the file."""

    def __init__(self, path: str, code: str):
        super().__init__(f"Could not read {path}: {code}")
        self.path = path
        self.code = code


@dataclass(frozen=True)
class MimeProfile:
    name: str
    content_types: Dict[str, str]
    default_type: str
    error_body: str = "Server Error: {code}"
    case_insensitive: bool = False
    use_platform_registry: bool = False
    aliases: Dict[str, str] = field(default_factory=dict)
    directory_index: bool = False
    log_requests: bool = False

    def content_type_for(self, path: str) -> str:
        ext = os.path.splitext(path)[1]
        if self.case_insensitive:
            ext = ext.lower()

        content_type = self.content_types.get(ext)
        if content_type is None and self.use_platform_registry:
            content_type, _ = mimetypes.guess_type(path, strict=False)
        return content_type or self.default_type

    def server_error_body(self, code: str) -> str:
        return self.error_body.format(code=code)


BASIC_TYPES = {
    ".html": "text/html",
    ".css": "text/css",
    ".js": "text/javascript",
    ".json": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
}

EXTENDED_TYPES = {
    ".html": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",
    ".json": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".wav": "audio/wav",
    ".mp4": "video/mp4",
    ".woff": "application/font-woff",
    ".ttf": "application/font-ttf",
    ".eot": "application/vnd.ms-fontobject",
    ".otf": "application/font-otf",
    ".wasm": "application/wasm",
}

PROFILES: Dict[str, MimeProfile] = {
    "basic": MimeProfile(
        name="basic",
        content_types=BASIC_TYPES,
        default_type="text/plain",
    ),
    "extended": MimeProfile(
        name="extended",
        content_types=EXTENDED_TYPES,
        default_type="application/octet-stream",
        error_body="500 Internal Server Error",
        case_insensitive=True,
        log_requests=True,
    ),
    "express": MimeProfile(
        name="express",
        content_types={".html": "text/html"},
        default_type="application/octet-stream",
        case_insensitive=True,
        use_platform_registry=True,
        aliases={"game": INDEX_FILE},
        directory_index=True,
    ),
}

DEFAULT_PROFILE = "basic"


def get_profile(name: Optional[str] = None) -> MimeProfile:
    """
    Look up a profile by name.

    Raises:
        ValueError: If the name is not a known profile.
    """
    name = (name or DEFAULT_PROFILE).strip().lower()
    if name not in PROFILES:
        available = ", ".join(sorted(PROFILES))
        raise ValueError(f"Unknown server profile '{name}'. Available profiles: {available}")
    return PROFILES[name]


def error_code_name(exc: OSError) -> str:
    """Symbolic errno name (EACCES, EISDIR, ...) for an OSError."""
    if exc.errno is None:
        return "UNKNOWN"
    return errno.errorcode.get(exc.errno, str(exc.errno))


def resolve_path(root: str, url_path: str, profile: MimeProfile) -> str:
    """
    Turn a URL path into an absolute filesystem path under root.

    "/" and "" map to index.html. Paths escaping the root raise
    ResourceNotFound.
    """
    relative = url_path.lstrip("/")
    if relative == "":
        relative = INDEX_FILE
    relative = profile.aliases.get(relative, relative)

    full_path = safe_join(os.path.abspath(root), relative)
    if full_path is None:
        raise ResourceNotFound(url_path)

    if profile.directory_index and os.path.isdir(full_path):
        full_path = os.path.join(full_path, INDEX_FILE)

    return full_path


def read_file(path: str) -> bytes:
    """
    Read a file's exact bytes.

    Raises:
        ResourceNotFound: The file does not exist.
        ResourceReadError: Any other OS error, with its errno name.
    """
    try:
        with open(path, "rb") as f:
            return f.read()
    except FileNotFoundError:
        raise ResourceNotFound(path)
    except ValueError:
        # Embedded NUL bytes can never name a real file
        raise ResourceNotFound(path)
    except OSError as e:
        raise ResourceReadError(path, error_code_name(e))


def load(root: str, url_path: str, profile: MimeProfile):
    """
    Resolve and read a URL path.

    Returns:
        Tuple of (body bytes, content type).
    """
    full_path = resolve_path(root, url_path, profile)
    content = read_file(full_path)
    return content, profile.content_type_for(full_path)
