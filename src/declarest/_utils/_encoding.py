import json
import math
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

from pydantic import BaseModel

from ..models.errors import SerializationError
from .constants import URI_COMPONENT_SAFE


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, (set, frozenset)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize_json(value: Any) -> str:
    """Encode ``value`` as compact JSON.

    pydantic models are dumped by alias. NaN and infinity are rejected since
    they have no JSON representation.

    Raises:
        SerializationError: If the value cannot be encoded.
    """
    try:
        return json.dumps(
            value,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
            default=_jsonable,
        )
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Unable to encode value as JSON: {e}") from e


def is_composite(value: Any) -> bool:
    return isinstance(value, (Mapping, list, tuple, set, frozenset, BaseModel))


def is_empty(value: Any) -> bool:
    """Whether an optional query value should be left out of the query string.

    Empty collections are not considered empty: they encode to ``[]``/``{}``.
    """
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0 or (isinstance(value, float) and math.isnan(value))
    return False


def to_text(value: Any) -> str:
    """String form used for path segments, query values and headers."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_uri_component(value: str) -> str:
    return quote(value, safe=URI_COMPONENT_SAFE)
