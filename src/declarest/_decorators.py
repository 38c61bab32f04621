"""Declaration surface: method decorators and parameter markers.

Operations are declared as methods of a :class:`~declarest.RestClient`
subclass. The verb decorator names the URL template, ``headers`` and
``produces`` add metadata, and each parameter's role is given through
``typing.Annotated``:

```python
class UsersClient(RestClient):
    @produces(MediaType.JSON)
    @headers({"Accept": "application/json"})
    @get("/users/{id}")
    def get_user(
        self,
        id: Annotated[str, Path("id")],
        active: Annotated[bool, Query("active")] = False,
    ) -> LazyResponse[dict]: ...
```

Everything is recorded in the registry when the class body is executed;
calls only read it back.
"""

import functools
import inspect
from typing import (
    Annotated,
    Any,
    Callable,
    List,
    Mapping,
    Optional,
    Tuple,
    TypeVar,
    Union,
    get_args,
    get_origin,
)

from ._compiler import MISSING
from ._registry import registry
from .models import DeclarationError, HttpMethod, MediaType, ParameterRole

F = TypeVar("F", bound=Callable[..., Any])

_BINDABLE_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.KEYWORD_ONLY,
)


class ParameterMarker:
    role: ParameterRole

    def __init__(self, key: Optional[str] = None) -> None:
        self.key = key

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.key!r})"


class Path(ParameterMarker):
    """Substitutes the argument for ``{key}`` in the URL template."""

    role = ParameterRole.PATH

    def __init__(self, key: str) -> None:
        super().__init__(key)


class Query(ParameterMarker):
    """Sends the argument as query parameter ``key``.

    By default the parameter is left out when the value is ``None``,
    ``False``, ``0`` or ``""``. Pass ``omit_if_empty=False`` to send those
    values; ``None`` is always left out.
    """

    role = ParameterRole.QUERY

    def __init__(self, key: str, *, omit_if_empty: bool = True) -> None:
        super().__init__(key)
        self.omit_if_empty = omit_if_empty

    def __repr__(self) -> str:
        return f"Query({self.key!r}, omit_if_empty={self.omit_if_empty})"


class Header(ParameterMarker):
    """Sends the argument as header ``key``, overriding client and operation headers."""

    role = ParameterRole.HEADER

    def __init__(self, key: str) -> None:
        super().__init__(key)


class Body(ParameterMarker):
    """JSON-encodes the argument as the request body. One per operation."""

    role = ParameterRole.BODY

    def __init__(self) -> None:
        super().__init__(None)


def operation_id(func: Callable[..., Any]) -> str:
    """Stable identifier of the operation declared by ``func``."""
    declared = getattr(func, "__operation_id__", None)
    if declared:
        return declared
    return f"{func.__module__}.{func.__qualname__}"


def _marker_of(annotation: Any, name: str) -> Optional[ParameterMarker]:
    if get_origin(annotation) is not Annotated:
        return None

    markers: List[ParameterMarker] = []
    for metadata in get_args(annotation)[1:]:
        if isinstance(metadata, type) and issubclass(metadata, Body):
            metadata = Body()
        if isinstance(metadata, ParameterMarker):
            markers.append(metadata)

    if len(markers) > 1:
        raise DeclarationError(
            f"Parameter '{name}' declares more than one binding: {markers}"
        )
    return markers[0] if markers else None


def collect_bindings(
    func: Callable[..., Any], op_id: Optional[str] = None
) -> Tuple[inspect.Signature, List[inspect.Parameter]]:
    """Register the bindings declared on ``func``'s parameters.

    Positions count the parameters following ``self``.

    Returns:
        The signature of ``func`` and the parameters positions refer to.
    """
    op_id = op_id or operation_id(func)
    try:
        signature = inspect.signature(func, eval_str=True)
    except NameError as e:
        raise DeclarationError(
            f"Cannot resolve the annotations of '{op_id}': {e}"
        ) from e

    parameters = [
        parameter
        for parameter in list(signature.parameters.values())[1:]
        if parameter.kind in _BINDABLE_KINDS
    ]

    for position, parameter in enumerate(parameters):
        marker = _marker_of(parameter.annotation, parameter.name)
        if marker is None:
            continue
        registry.register_binding(
            op_id,
            marker.role,
            marker.key,
            position,
            omit_if_empty=getattr(marker, "omit_if_empty", True),
        )

    return signature, parameters


def _method_builder(method: HttpMethod) -> Callable[[str], Callable[[F], F]]:
    def builder(url: str) -> Callable[[F], F]:
        def decorator(func: F) -> F:
            op_id = operation_id(func)
            registry.register_operation(op_id, method, url)
            signature, parameters = collect_bindings(func, op_id)

            @functools.wraps(func)
            def wrapper(self, *args: Any, **kwargs: Any) -> Any:
                bound = signature.bind_partial(self, *args, **kwargs)
                bound.apply_defaults()
                arguments = [bound.arguments.get(p.name, MISSING) for p in parameters]
                return self.invoke(op_id, arguments)

            wrapper.__operation_id__ = op_id  # type: ignore[attr-defined]
            return wrapper  # type: ignore[return-value]

        return decorator

    return builder


get = _method_builder(HttpMethod.GET)
post = _method_builder(HttpMethod.POST)
put = _method_builder(HttpMethod.PUT)
delete = _method_builder(HttpMethod.DELETE)
head = _method_builder(HttpMethod.HEAD)


def headers(headers_def: Mapping[str, str]) -> Callable[[F], F]:
    """Static headers sent with every call of the operation."""

    def decorator(func: F) -> F:
        registry.register_headers(operation_id(func), headers_def)
        return func

    return decorator


def produces(media_type: Union[MediaType, str]) -> Callable[[F], F]:
    """Declare the media type of the response; JSON responses are deserialized."""

    def decorator(func: F) -> F:
        registry.register_produces(operation_id(func), media_type)
        return func

    return decorator
