from logging import getLogger
from typing import Any, Optional

from ._deserializer import Deserializer, JsonDeserializer
from ._lazy import LazyResponse
from ._transport import Transport
from ._utils.constants import LOGGER_NAME
from .models import RequestDescriptor


class Dispatcher:
    """Hands compiled requests to the transport.

    When an operation produces JSON, the raw payload is mapped through the
    deserializer before any response interceptor sees it. Deserialization
    errors surface when the response is consumed, not here.
    """

    def __init__(
        self, transport: Transport, deserializer: Optional[Deserializer] = None
    ) -> None:
        self._logger = getLogger(LOGGER_NAME)
        self._transport = transport
        self._deserializer = deserializer or JsonDeserializer()

    @property
    def transport(self) -> Transport:
        return self._transport

    def dispatch(
        self, request: RequestDescriptor, produces_json: bool = False
    ) -> LazyResponse[Any]:
        self._logger.debug(f"Request: {request.method} {request.full_url}")
        self._logger.debug(f"HEADERS: {request.headers}")

        response = self._transport.send(request)
        if produces_json:
            response = response.map(self._deserializer)
        return response
