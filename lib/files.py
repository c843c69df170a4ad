# =============================================================================
# lib/files.py - Filename & Upload Helpers
# =============================================================================
# Pure helpers used by ingestion and delivery:
# - kind inference from the filename extension (never from content bytes)
# - filename sanitising for storage keys and Content-Disposition
# - storage key layout
# - published-at date normalisation
# =============================================================================

import re
import time
from datetime import date, datetime, timezone

from core.models.resource import ResourceKind


# =============================================================================
# Kind Inference
# =============================================================================

# Extension (lowercase, no dot) -> kind. "link" and posts are never uploads.
EXTENSION_KINDS: dict[str, ResourceKind] = {
    "pdf": ResourceKind.PDF,
    "png": ResourceKind.IMAGE,
    "jpg": ResourceKind.IMAGE,
    "jpeg": ResourceKind.IMAGE,
    "webp": ResourceKind.IMAGE,
    "gif": ResourceKind.IMAGE,
    "mp4": ResourceKind.VIDEO,
    "mov": ResourceKind.VIDEO,
    "webm": ResourceKind.VIDEO,
    "mkv": ResourceKind.VIDEO,
    "ppt": ResourceKind.SLIDE,
    "pptx": ResourceKind.SLIDE,
    "key": ResourceKind.SLIDE,
    "doc": ResourceKind.DOC,
    "docx": ResourceKind.DOC,
    "hwp": ResourceKind.DOC,
    "txt": ResourceKind.DOC,
    "zip": ResourceKind.ZIP,
    "7z": ResourceKind.ZIP,
    "rar": ResourceKind.ZIP,
}


def file_extension(filename: str) -> str:
    """
    Lowercase extension without the dot, or "" if there is none.

    Example:
        file_extension("Report.Final.PDF")  # "pdf"
        file_extension("README")            # ""
    """
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def infer_kind(filename: str) -> ResourceKind | None:
    """Kind for a filename, or None when the extension isn't supported."""
    return EXTENSION_KINDS.get(file_extension(filename))


def supported_extensions() -> list[str]:
    return sorted(EXTENSION_KINDS)


# =============================================================================
# Filename Sanitising
# =============================================================================

_UNSAFE_KEY_CHARS = re.compile(r"[^\w.\-]+", re.ASCII)
# Attachment names may keep Hangul so Korean titles stay readable
_UNSAFE_ATTACHMENT_CHARS = re.compile(r"[^\w.\-가-힣]+", re.ASCII)


def safe_key_name(filename: str) -> str:
    """
    Filename safe to embed in a storage key (ASCII word chars, dot, dash).

    Example:
        safe_key_name("ATM vol.1 (final).pdf")  # "ATM_vol.1_final_.pdf"
    """
    return _UNSAFE_KEY_CHARS.sub("_", filename) or "file"


def attachment_filename(title: str, original_filename: str | None = None) -> str:
    """
    Download filename derived from a resource title.

    The original file's extension is appended when the title lacks it, so
    "ATM Vol.1" with "atm.pdf" downloads as "ATM_Vol.1.pdf".
    """
    name = _UNSAFE_ATTACHMENT_CHARS.sub("_", (title or "").strip()) or "file"
    ext = file_extension(original_filename or "")
    if ext and file_extension(name) != ext:
        name = f"{name}.{ext}"
    return name


# =============================================================================
# Storage Keys
# =============================================================================

def _epoch_millis() -> int:
    return int(time.time() * 1000)


def build_storage_key(
    board_slug: str,
    filename: str,
    resource_id: int | None = None,
    token: int | None = None,
) -> str:
    """
    Build an object key namespaced by board slug.

    New uploads:   "{slug}/{epoch_ms}-{safe_name}"
    Replacements:  "{slug}/{resource_id}/{epoch_ms}-{safe_name}"

    Args:
        board_slug: Slug of the owning board
        filename: Original filename (sanitised here)
        resource_id: Set for replacements so history stays grouped
        token: Uniqueness token (defaults to the current epoch millis)
    """
    unique = token if token is not None else _epoch_millis()
    leaf = f"{unique}-{safe_key_name(filename)}"
    if resource_id is not None:
        return f"{board_slug}/{resource_id}/{leaf}"
    return f"{board_slug}/{leaf}"


# =============================================================================
# Dates
# =============================================================================

_YMD = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def normalize_published_at(value: str | None) -> str:
    """
    Submitted YYYY-MM-DD if it's a real calendar date, else today's UTC date.

    Example:
        normalize_published_at("2026-01-08")  # "2026-01-08"
        normalize_published_at("")           # e.g. "2026-10-19"
    """
    raw = (value or "").strip()
    if _YMD.match(raw):
        try:
            return date.fromisoformat(raw).isoformat()
        except ValueError:
            pass
    return utc_today().isoformat()
