from __future__ import annotations

import json
from typing import Any

from fastapi import Request


async def read_json_object(request: Request) -> dict[str, Any]:
    """Return the request body as a dict, or an empty dict if it is not a JSON object.

    Routes treat an unreadable body the same as one missing its fields, so the
    400 they send keeps the route's own error shape.
    """
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return body if isinstance(body, dict) else {}
