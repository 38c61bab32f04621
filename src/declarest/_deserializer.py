import json
from typing import Any, Protocol, Union

import httpx

from .models import ParseError

RawPayload = Union[httpx.Response, bytes, str]


class Deserializer(Protocol):
    def __call__(self, payload: Any) -> Any: ...


class JsonDeserializer:
    """Parses a raw payload as JSON.

    Accepts an ``httpx.Response`` as returned by :class:`HttpxTransport`, or
    the raw ``bytes``/``str`` content of one.
    """

    def __call__(self, payload: RawPayload) -> Any:
        if isinstance(payload, httpx.Response):
            content: Union[bytes, str] = payload.content
        else:
            content = payload

        try:
            return json.loads(content)
        except (TypeError, ValueError) as e:
            if isinstance(content, bytes):
                text = content.decode(errors="replace")
            else:
                text = str(content)
            raise ParseError(f"Response is not valid JSON: {e}", payload=text) from e
