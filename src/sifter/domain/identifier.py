"""Project identifier detection and normalization."""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel

IdentifierType = Literal["twitter", "discord", "telegram", "github", "website", "name", "unknown"]

_NAME_RE = re.compile(r"^[a-z0-9\s]+$")
_CANONICAL_STRIP_RE = re.compile(r"[^a-z0-9]")
_PLATFORM_PREFIXES = {
    "discord": ("discord.gg/", "discord.com/invite/"),
    "telegram": ("t.me/", "telegram.me/"),
    "github": ("github.com/",),
}


class ProjectIdentifier(BaseModel):
    input: str
    type: IdentifierType
    canonical_name: str
    url: str = ""


def detect_input_type(value: str) -> IdentifierType:
    normalized = str(value or "").strip().lower()
    if not normalized:
        return "unknown"
    if normalized.startswith("@"):
        return "twitter"
    for kind in ("discord", "telegram", "github"):
        if any(prefix in normalized for prefix in _PLATFORM_PREFIXES[kind]):
            return kind
    if normalized.startswith("http") or ("." in normalized and " " not in normalized):
        return "website"
    if len(normalized) > 2 and _NAME_RE.match(normalized):
        return "name"
    return "unknown"


def _handle_after(value: str, prefixes: tuple[str, ...]) -> str:
    lowered = value.lower()
    for prefix in prefixes:
        index = lowered.find(prefix)
        if index >= 0:
            tail = value[index + len(prefix):]
            return tail.split("?", 1)[0].strip("/")
    return value


def platform_url(kind: IdentifierType, value: str) -> str:
    clean = re.sub(r"\s+", "", str(value or "").strip().lstrip("@"))
    if kind == "twitter":
        return f"https://twitter.com/{clean}"
    if kind in _PLATFORM_PREFIXES:
        handle = _handle_after(clean, _PLATFORM_PREFIXES[kind])
        base = _PLATFORM_PREFIXES[kind][0]
        return f"https://{base}{handle}"
    if kind == "website":
        return clean if clean.lower().startswith("http") else f"https://{clean}"
    return ""


def canonical_name(value: str) -> str:
    return _CANONICAL_STRIP_RE.sub("_", str(value or "").strip().lower())


def parse_identifier(value: str) -> ProjectIdentifier:
    """Resolve free-form user input into a typed project identifier."""

    raw = str(value or "").strip()
    kind = detect_input_type(raw)
    return ProjectIdentifier(
        input=raw,
        type=kind,
        canonical_name=canonical_name(raw),
        url=platform_url(kind, raw),
    )
