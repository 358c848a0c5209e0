"""
Shared helpers for reading the ``data`` member of a Worksection envelope.
"""

from typing import Any, Dict, List


def data_list(payload: Dict[str, Any]) -> List[Any]:
    """Return ``data`` when it is a list, otherwise an empty list."""
    data = payload.get("data")
    return data if isinstance(data, list) else []


def data_record(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Return ``data`` when it is an object, otherwise an empty dict."""
    data = payload.get("data")
    return data if isinstance(data, dict) else {}
