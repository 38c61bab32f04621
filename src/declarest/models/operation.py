from enum import Enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"


class ParameterRole(str, Enum):
    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    BODY = "body"


class MediaType(str, Enum):
    """Media types an operation can declare through ``produces``."""

    JSON = "application/json"


class ParameterBinding(BaseModel):
    """Associates the argument at ``position`` with a request part.

    ``key`` names the path placeholder, query parameter or header and is
    ``None`` for the body. ``omit_if_empty`` only affects query bindings: when
    set, values such as ``0``, ``False`` and ``""`` leave the parameter out of
    the query string.
    """

    model_config = ConfigDict(frozen=True)

    role: ParameterRole
    key: Optional[str] = None
    position: int = Field(ge=0)
    omit_if_empty: bool = True


class OperationDescriptor(BaseModel):
    """Read-only view of everything declared for one operation."""

    model_config = ConfigDict(frozen=True)

    operation_id: str
    method: HttpMethod
    url_template: str
    static_headers: Dict[str, str] = Field(default_factory=dict)
    produces_json: bool = False
    bindings: Tuple[ParameterBinding, ...] = ()

    def bindings_for(self, role: ParameterRole) -> Tuple[ParameterBinding, ...]:
        # sorted() is stable, so equal positions keep registration order
        return tuple(
            sorted(
                (binding for binding in self.bindings if binding.role == role),
                key=lambda binding: binding.position,
            )
        )

    @property
    def path_bindings(self) -> Tuple[ParameterBinding, ...]:
        return self.bindings_for(ParameterRole.PATH)

    @property
    def query_bindings(self) -> Tuple[ParameterBinding, ...]:
        return self.bindings_for(ParameterRole.QUERY)

    @property
    def header_bindings(self) -> Tuple[ParameterBinding, ...]:
        return self.bindings_for(ParameterRole.HEADER)

    @property
    def body_binding(self) -> Optional[ParameterBinding]:
        bodies = self.bindings_for(ParameterRole.BODY)
        return bodies[0] if bodies else None
