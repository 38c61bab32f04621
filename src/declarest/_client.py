from logging import getLogger
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    Mapping,
    Optional,
    Sequence,
    Type,
    TypeVar,
)

from ._compiler import compile_request
from ._config import Config
from ._deserializer import Deserializer
from ._dispatcher import Dispatcher
from ._interceptors import Interceptor, InterceptorPipeline
from ._lazy import LazyResponse
from ._registry import OperationRegistry
from ._registry import registry as default_registry
from ._transport import HttpxTransport, Transport
from ._utils.constants import LOGGER_NAME
from .models import OperationDescriptor, RequestDescriptor

C = TypeVar("C", bound=Type["RestClient"])


class RestClient:
    """Base class for declarative REST clients.

    Subclasses declare operations with the verb decorators; calling one
    compiles a request from the call's arguments, passes it through
    :meth:`request_interceptor`, dispatches it and returns the lazy response
    after :meth:`response_interceptor`.

    The base URL is resolved from the constructor argument, then the
    :func:`base_url` class decorator, then the ``DECLAREST_BASE_URL``
    environment variable. Default headers declared with
    :func:`default_headers` are overridden per key by the constructor's.
    """

    __base_url__: Optional[str] = None
    __default_headers__: Optional[Dict[str, str]] = None

    def __init__(
        self,
        base_url: Optional[str] = None,
        default_headers: Optional[Mapping[str, str]] = None,
        *,
        transport: Optional[Transport] = None,
        deserializer: Optional[Deserializer] = None,
        interceptors: Iterable[Interceptor] = (),
        registry: OperationRegistry = default_registry,
        strict: bool = False,
    ) -> None:
        self._logger = getLogger(LOGGER_NAME)

        headers: Optional[Dict[str, str]] = None
        if self.__default_headers__ is not None or default_headers is not None:
            headers = {**(self.__default_headers__ or {}), **(default_headers or {})}

        self._config = Config.from_env(
            base_url=base_url if base_url is not None else self.__base_url__,
            default_headers=headers,
        )
        self._transport = transport or HttpxTransport()
        self._dispatcher = Dispatcher(self._transport, deserializer)
        self._interceptors = InterceptorPipeline(interceptors)
        self._registry = registry
        self._strict = strict

        self._logger.debug(f"BASE URL: {self._config.base_url}")

    @property
    def config(self) -> Config:
        return self._config

    @property
    def interceptors(self) -> InterceptorPipeline:
        return self._interceptors

    def get_base_url(self) -> Optional[str]:
        return self._config.base_url

    def get_default_headers(self) -> Optional[Dict[str, str]]:
        return self._config.default_headers

    def request_interceptor(self, request: RequestDescriptor) -> RequestDescriptor:
        """Called with every compiled request before it is dispatched.

        Returns the request to send. Subclasses overriding this should call
        ``super()`` to keep the registered interceptors running.
        """
        return self._interceptors.before_dispatch(request)

    def response_interceptor(self, response: LazyResponse[Any]) -> LazyResponse[Any]:
        """Called with every lazy response, after deserialization."""
        return self._interceptors.after_dispatch(response)

    def compile(self, operation_id: str, arguments: Sequence[Any]) -> RequestDescriptor:
        return self._compile(self._registry.get(operation_id), arguments)

    def _compile(
        self, operation: OperationDescriptor, arguments: Sequence[Any]
    ) -> RequestDescriptor:
        config = Config(
            base_url=self.get_base_url(), default_headers=self.get_default_headers()
        )
        return compile_request(operation, config, arguments, strict=self._strict)

    def invoke(self, operation_id: str, arguments: Sequence[Any]) -> LazyResponse[Any]:
        """Run the full pipeline for a registered operation."""
        operation = self._registry.get(operation_id)
        request = self._compile(operation, arguments)
        request = self.request_interceptor(request) or request
        response = self._dispatcher.dispatch(request, operation.produces_json)
        return self.response_interceptor(response)

    def close(self) -> None:
        close = getattr(self._transport, "close", None)
        if close is not None:
            close()

    async def aclose(self) -> None:
        aclose = getattr(self._transport, "aclose", None)
        if aclose is not None:
            await aclose()

    def __enter__(self) -> "RestClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    async def __aenter__(self) -> "RestClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


def base_url(url: str) -> Callable[[C], C]:
    """Set the base URL of every operation of a client class."""

    def decorator(cls: C) -> C:
        cls.__base_url__ = url
        return cls

    return decorator


def default_headers(headers: Mapping[str, str]) -> Callable[[C], C]:
    """Set headers sent with every operation of a client class."""

    def decorator(cls: C) -> C:
        cls.__default_headers__ = {key: str(value) for key, value in headers.items()}
        return cls

    return decorator
