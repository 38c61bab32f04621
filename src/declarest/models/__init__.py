from .errors import (
    DeclarationError,
    DeclarestError,
    HttpStatusError,
    MissingArgumentError,
    OperationNotFoundError,
    ParseError,
    SerializationError,
    TransportError,
)
from .operation import (
    HttpMethod,
    MediaType,
    OperationDescriptor,
    ParameterBinding,
    ParameterRole,
)
from .request import RequestDescriptor

__all__ = [
    "DeclarationError",
    "DeclarestError",
    "HttpMethod",
    "HttpStatusError",
    "MediaType",
    "MissingArgumentError",
    "OperationDescriptor",
    "OperationNotFoundError",
    "ParameterBinding",
    "ParameterRole",
    "ParseError",
    "RequestDescriptor",
    "SerializationError",
    "TransportError",
]
