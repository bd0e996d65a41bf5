"""Classification and normalization of raw declaration values."""

from __future__ import annotations

import re
from typing import Callable, List, Optional

from .models import ClassifiedValue, ValueKind

PREPROCESSOR_SIGIL = "$"
TOKEN_LIMIT = 32

IMAGE_EXTENSIONS = ("png", "jpg", "jpeg", "gif", "svg", "webp", "bmp", "ico", "avif")

_QUOTES = ("'", '"')
_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]")
_SIGIL_NAME_RE = re.compile(r"^\$([\w-]+)")
_GRADIENT_RE = re.compile(r"(linear|radial|conic)-gradient\s*\(", re.IGNORECASE)
_COLOR_RE = re.compile(r"#[0-9a-f]{3,8}\b|rgba?\([^)]+\)|hsla?\([^)]+\)", re.IGNORECASE)
_EXT_GROUP = "|".join(IMAGE_EXTENSIONS)
_URL_RE = re.compile(
    r"^url\(\s*(?P<quote>['\"]?)(?P<path>[^'\"()]+?)(?P=quote)\s*\)$",
    re.IGNORECASE,
)
_BARE_PATH_RE = re.compile(r"^[^\s'\"()]+$")
_IMAGE_PATH_RE = re.compile(rf"\.(?:{_EXT_GROUP})(?:[?#].*)?$", re.IGNORECASE)
_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*:", re.IGNORECASE)

Resolver = Callable[[str], Optional[str]]


def alnum(value: str) -> str:
    """Strip every character that is not an ASCII letter or digit."""
    return _NON_ALNUM_RE.sub("", value)


def classify(value: str, resolve: Optional[Resolver] = None) -> ClassifiedValue:
    """Classify ``value`` and derive the token embedded into variable names.

    ``resolve`` maps a preprocessor variable name (without the sigil) to the
    literal it was defined with, or ``None`` when it is unknown.
    """
    if value.startswith(_QUOTES):
        return ClassifiedValue(ValueKind.STRING_LITERAL, _string_token(value))

    if value.startswith(PREPROCESSOR_SIGIL):
        return ClassifiedValue(ValueKind.PREPROCESSOR_REF, _preprocessor_token(value, resolve))

    if "gradient" in value:
        token = _gradient_token(value)
        if token is not None:
            return ClassifiedValue(ValueKind.GRADIENT, token)

    if value.strip().lower() == "transparent":
        return ClassifiedValue(ValueKind.TRANSPARENT, "")

    asset_path = image_path(value)
    if asset_path is not None:
        stem = asset_path.rsplit("/", 1)[-1].split(".", 1)[0]
        return ClassifiedValue(ValueKind.IMAGE_URL, alnum(stem), asset_path=asset_path)

    return ClassifiedValue(ValueKind.PLAIN, alnum(value.lstrip("#")))


def image_path(value: str) -> Optional[str]:
    """Return the relative image path referenced by ``value``, if any."""
    candidate = value.strip()
    match = _URL_RE.match(candidate)
    if match:
        candidate = match.group("path").strip()
    elif not _BARE_PATH_RE.match(candidate):
        return None

    if _SCHEME_RE.match(candidate) or candidate.startswith("/"):
        return None
    if not _IMAGE_PATH_RE.search(candidate):
        return None
    return re.split(r"[?#]", candidate, maxsplit=1)[0]


def _string_token(value: str) -> str:
    content = value[1:]
    if content.endswith(_QUOTES):
        content = content[:-1]
    return _NON_ALNUM_RE.sub("-", content)


def _preprocessor_token(value: str, resolve: Optional[Resolver]) -> str:
    match = _SIGIL_NAME_RE.match(value)
    name = match.group(1) if match else ""
    resolved = resolve(name) if resolve is not None and name else None
    if resolved:
        return alnum(resolved.lstrip("#"))
    return name


def _gradient_token(value: str) -> Optional[str]:
    match = _GRADIENT_RE.search(value)
    if match is None:
        return None
    kind = match.group(1).lower()
    arguments = _balanced_arguments(value, match.end())
    colors: List[str] = [alnum(color) for color in _COLOR_RE.findall(arguments)]
    fragment = "".join(colors)[:TOKEN_LIMIT]
    return f"{kind}-{fragment}" if fragment else kind


def _balanced_arguments(value: str, start: int) -> str:
    depth = 1
    for index in range(start, len(value)):
        char = value[index]
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return value[start:index]
    return value[start:]


__all__ = ["IMAGE_EXTENSIONS", "PREPROCESSOR_SIGIL", "TOKEN_LIMIT", "alnum", "classify", "image_path"]
