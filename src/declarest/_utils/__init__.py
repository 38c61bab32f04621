from ._encoding import (
    encode_uri_component,
    is_composite,
    is_empty,
    serialize_json,
    to_text,
)
from ._errors import handle_errors

__all__ = [
    "encode_uri_component",
    "handle_errors",
    "is_composite",
    "is_empty",
    "serialize_json",
    "to_text",
]
