"""Declarative REST clients built from annotated methods."""

from ._client import RestClient, base_url, default_headers
from ._compiler import compile_request
from ._config import Config
from ._decorators import (
    Body,
    Header,
    Path,
    Query,
    delete,
    get,
    head,
    headers,
    operation_id,
    post,
    produces,
    put,
)
from ._deserializer import JsonDeserializer
from ._dispatcher import Dispatcher
from ._interceptors import Interceptor, InterceptorPipeline, LoggingInterceptor
from ._lazy import LazyResponse
from ._registry import OperationRegistry, registry
from ._transport import HttpxTransport, Transport
from .models import (
    DeclarationError,
    DeclarestError,
    HttpMethod,
    HttpStatusError,
    MediaType,
    MissingArgumentError,
    OperationDescriptor,
    OperationNotFoundError,
    ParameterBinding,
    ParameterRole,
    ParseError,
    RequestDescriptor,
    SerializationError,
    TransportError,
)

__all__ = [
    "Body",
    "Config",
    "DeclarationError",
    "DeclarestError",
    "Dispatcher",
    "Header",
    "HttpMethod",
    "HttpStatusError",
    "HttpxTransport",
    "Interceptor",
    "InterceptorPipeline",
    "JsonDeserializer",
    "LazyResponse",
    "LoggingInterceptor",
    "MediaType",
    "MissingArgumentError",
    "OperationDescriptor",
    "OperationNotFoundError",
    "OperationRegistry",
    "ParameterBinding",
    "ParameterRole",
    "ParseError",
    "Path",
    "Query",
    "RequestDescriptor",
    "RestClient",
    "SerializationError",
    "Transport",
    "TransportError",
    "base_url",
    "compile_request",
    "default_headers",
    "delete",
    "get",
    "head",
    "headers",
    "operation_id",
    "post",
    "produces",
    "put",
    "registry",
]
