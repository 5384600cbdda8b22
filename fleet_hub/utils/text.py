"""Small deterministic string helpers used by the page generators."""

import re
from datetime import datetime, timezone
from typing import Sequence, TypeVar

T = TypeVar("T")

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


def hash_string(value: str) -> int:
    """32-bit rolling string hash (h * 31 + code unit), absolute value.

    Hashes UTF-16 code units so the variant chosen for a given entity pair
    stays stable across the existing published pages.
    """
    h = 0
    raw = value.encode("utf-16-le")
    for i in range(0, len(raw), 2):
        unit = raw[i] | (raw[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def pick(items: Sequence[T], seed: int, offset: int = 0) -> T:
    return items[(seed + offset) % len(items)]


def interpolate(template: str, data: dict[str, object]) -> str:
    """Replace ``{key}`` placeholders; missing or empty values keep the placeholder."""

    def _sub(match: re.Match[str]) -> str:
        value = data.get(match.group(1))
        if value is None or value == "" or value == 0 or value is False:
            return match.group(0)
        return str(value)

    return _PLACEHOLDER_RE.sub(_sub, template)


def title_case(value: str) -> str:
    return " ".join(w[:1].upper() + w[1:] for w in value.split(" ") if w)


def word_count(text: str) -> int:
    return len(text.split())


def iso_timestamp(value: datetime | None = None) -> str:
    """ISO 8601 in UTC with millisecond precision and a ``Z`` suffix; defaults to now."""
    if value is None:
        value = datetime.now(timezone.utc)
    elif value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
