from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence

from worksection_mcp.core.errors import WorksectionInputError

_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def comma_separated(values: Optional[Sequence[str]]) -> Optional[str]:
    """Join values with ", "; None when there is nothing to send."""
    if not values:
        return None
    return ", ".join(values)


def join_extras(
    include: Optional[Iterable[str]], allowed: Sequence[str]
) -> Optional[str]:
    """Validate requested extra fields and render them for the ``extra`` param."""
    if not include:
        return None
    extras: List[str] = []
    for item in include:
        if item not in allowed:
            raise WorksectionInputError(
                f"Unsupported extra {item!r}; expected one of {', '.join(allowed)}"
            )
        extras.append(item)
    return ", ".join(extras) or None


def format_ws_date(raw: Optional[str]) -> Optional[str]:
    """
    Convert ISO dates (YYYY-MM-DD) to Worksection's DD.MM.YYYY.
    Anything else is passed through trimmed so the API can judge it.
    """
    if not raw:
        return None
    trimmed = raw.strip()
    if not trimmed:
        return None
    match = _ISO_DATE_RE.match(trimmed)
    if match:
        year, month, day = match.groups()
        return f"{day}.{month}.{year}"
    return trimmed


def require_id(value: Optional[str], label: str) -> str:
    text = str(value).strip() if value is not None else ""
    if not text:
        raise WorksectionInputError(f"{label} is required")
    return text


def non_empty_list(values: Optional[Sequence[str]]) -> Optional[List[str]]:
    return list(values) if values else None
