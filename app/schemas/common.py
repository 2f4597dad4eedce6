# app/schemas/common.py
"""Uniform response envelope shared by every endpoint"""
from typing import Any, Optional

from app.core.exceptions import ValidationError
from app.services.scheduling.time_utils import parse_hhmm


def success_response(data: Any = None, message: Optional[str] = None, **extra) -> dict:
    """Build a success envelope, dropping empty keys"""
    body = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra)
    return body


def validate_hhmm(value: Optional[str], field: str) -> Optional[str]:
    """field_validator helper: pydantic only collects ValueError"""
    if value is None:
        return value
    try:
        return parse_hhmm(value, field)
    except ValidationError as e:
        raise ValueError(e.message)
