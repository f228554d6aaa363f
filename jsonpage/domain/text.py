"""Display text for JSON values shown inside HTML elements."""

import json
from typing import Any


def display_text(value: Any) -> str:
    """Coerce a JSON value to the text shown inside an element."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)
