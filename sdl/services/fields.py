"""
Field Mapper
------------
Payload → engine fields. No filtering, no coercion, no reserved keys.
"""

from typing import Any, Mapping

from sdl.models.schemas import Fields


def to_fields(payload: Mapping[str, Any]) -> Fields:
    return {key: value for key, value in payload.items()}
