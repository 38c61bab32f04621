from logging import getLogger
from typing import Any, Iterable, List, Optional

from ._lazy import LazyResponse
from ._utils.constants import LOGGER_NAME
from .models import RequestDescriptor


class Interceptor:
    """Hook into every call made by a client.

    Subclasses override either method. ``before_dispatch`` returns the request
    to send, which may be a new one; returning ``None`` keeps the current
    request. ``after_dispatch`` receives the lazy response, already
    deserialized when the operation produces JSON, and returns one of the same
    shape.
    """

    def before_dispatch(
        self, request: RequestDescriptor
    ) -> Optional[RequestDescriptor]:
        return request

    def after_dispatch(self, response: LazyResponse[Any]) -> LazyResponse[Any]:
        return response


class InterceptorPipeline:
    """Runs interceptors in registration order for both stages.

    Errors raised by an interceptor propagate to the caller.
    """

    def __init__(self, interceptors: Iterable[Interceptor] = ()) -> None:
        self._interceptors: List[Interceptor] = list(interceptors)

    def add(self, interceptor: Interceptor) -> None:
        self._interceptors.append(interceptor)

    def __iter__(self):
        return iter(self._interceptors)

    def __len__(self) -> int:
        return len(self._interceptors)

    def before_dispatch(self, request: RequestDescriptor) -> RequestDescriptor:
        for interceptor in self._interceptors:
            result = interceptor.before_dispatch(request)
            if result is not None:
                request = result
        return request

    def after_dispatch(self, response: LazyResponse[Any]) -> LazyResponse[Any]:
        for interceptor in self._interceptors:
            response = interceptor.after_dispatch(response)
        return response


class LoggingInterceptor(Interceptor):
    """Logs outgoing requests and, once consumed, their responses."""

    def __init__(self, logger_name: str = LOGGER_NAME) -> None:
        self._logger = getLogger(logger_name)

    def before_dispatch(self, request: RequestDescriptor) -> RequestDescriptor:
        self._logger.info(f"{request.method} {request.full_url}")
        return request

    def after_dispatch(self, response: LazyResponse[Any]) -> LazyResponse[Any]:
        def log_error(error: Exception) -> None:
            self._logger.warning(f"Request failed: {error!r}")

        return response.tap(
            lambda value: self._logger.info(f"Response: {type(value).__name__}")
        ).map_error(log_error)
