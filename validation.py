# =============================================================
# ✔️ VALIDATION — Bookmark & category input checks
# =============================================================

import re
from typing import NamedTuple, Optional
from urllib.parse import urlsplit

# Schemes that need a host to be a usable absolute URL.
HOST_SCHEMES = {"http", "https", "ftp", "ws", "wss"}

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")


class ValidationResult(NamedTuple):
    valid: bool
    reason: Optional[str] = None


OK = ValidationResult(True)


def validate_url(url) -> ValidationResult:
    """Check that ``url`` is an absolute URL (scheme, and a host for web schemes)."""
    if not isinstance(url, str) or not url.strip():
        return ValidationResult(False, "URL is required")
    if url != url.strip() or any(c.isspace() for c in url):
        return ValidationResult(False, "Invalid URL format")
    if not _SCHEME_RE.match(url):
        return ValidationResult(False, "Invalid URL format")

    try:
        parts = urlsplit(url)
        parts.port  # raises on a non-numeric or out-of-range port
    except ValueError:
        return ValidationResult(False, "Invalid URL format")

    scheme = parts.scheme.lower()
    if scheme in HOST_SCHEMES and not parts.hostname:
        return ValidationResult(False, "Invalid URL format")
    if scheme not in HOST_SCHEMES and scheme != "file" and not (parts.netloc or parts.path):
        return ValidationResult(False, "Invalid URL format")
    return OK


def validate_new_bookmark(title, url) -> ValidationResult:
    if not title or not url:
        return ValidationResult(False, "Title and URL are required")
    return validate_url(url)


def validate_category_name(name, existing_names=()) -> ValidationResult:
    """Name must be non-empty once trimmed and unique ignoring case."""
    if not name or not name.strip():
        return ValidationResult(False, "Category name is required")
    wanted = name.strip().lower()
    if any(n.lower() == wanted for n in existing_names):
        return ValidationResult(False, "Category already exists")
    return OK


def validate_bookmark_form(form: dict) -> dict:
    """Client-side form check; returns ``{field: message}`` for each problem."""
    errors = {}
    title = (form.get("title") or "").strip()
    url = (form.get("url") or "").strip()

    if not title:
        errors["title"] = "Title is required"
    if not url:
        errors["url"] = "URL is required"
    elif not validate_url(url).valid:
        errors["url"] = "Please enter a valid URL (e.g., https://example.com)"
    try:
        form_category_id(form.get("categoryId"))
    except ValueError:
        errors["categoryId"] = "Please choose a valid category"
    return errors


def form_category_id(value) -> Optional[int]:
    """Form select value to a category id: ""/None mean uncategorized."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"invalid category id: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise ValueError(f"invalid category id: {value!r}")
