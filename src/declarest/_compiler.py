from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from ._config import Config
from ._utils import (
    encode_uri_component,
    is_composite,
    is_empty,
    serialize_json,
    to_text,
)
from .models import (
    MissingArgumentError,
    OperationDescriptor,
    ParameterBinding,
    RequestDescriptor,
)

# Placeholder for a declared parameter the caller did not supply
MISSING: Any = object()


def compile_request(
    operation: OperationDescriptor,
    config: Optional[Config],
    arguments: Sequence[Any],
    *,
    strict: bool = False,
) -> RequestDescriptor:
    """Build the request for one call of ``operation``.

    Steps run in a fixed order: body, path, query, headers, url. Any failure
    aborts compilation, so nothing partial is ever dispatched.

    Args:
        operation: The declared operation.
        config: Client level base URL and default headers. ``None`` or absent
            fields resolve to an empty base URL and no default headers.
        arguments: Call argument values indexed by binding position. A slot
            holding :data:`MISSING` counts as not supplied.
        strict: Raise :class:`MissingArgumentError` for a binding whose
            position is outside ``arguments``, or whose slot is
            :data:`MISSING`, instead of treating it as absent.

    Returns:
        RequestDescriptor: A new, fully resolved request.

    Raises:
        SerializationError: If the body or a composite argument cannot be
            JSON-encoded.
        MissingArgumentError: In strict mode only.
    """
    values = tuple(arguments)

    def value_of(binding: ParameterBinding) -> Any:
        if binding.position < len(values) and values[binding.position] is not MISSING:
            return values[binding.position]
        if strict:
            raise MissingArgumentError(operation.operation_id, binding.position)
        return None

    body = _compile_body(operation.body_binding, value_of)
    path = _resolve_path(operation.url_template, operation.path_bindings, value_of)
    query = _build_query(operation.query_bindings, value_of)
    headers = _merge_headers(
        (config.default_headers if config else None) or {},
        operation.static_headers,
        {
            binding.key: _text_of(value)
            for binding in operation.header_bindings
            if binding.key and (value := value_of(binding)) is not None
        },
    )
    base_url = (config.base_url if config else None) or ""

    return RequestDescriptor(
        method=operation.method.value,
        url=base_url + path,
        headers=headers,
        query=query,
        body=body,
    )


def _text_of(value: Any) -> str:
    return serialize_json(value) if is_composite(value) else to_text(value)


def _compile_body(binding: Optional[ParameterBinding], value_of) -> Optional[str]:
    if binding is None:
        return None
    value = value_of(binding)
    if value is None:
        return None
    return serialize_json(value)


def _resolve_path(
    template: str, bindings: Iterable[ParameterBinding], value_of
) -> str:
    path = template
    for binding in bindings:
        placeholder = "{" + str(binding.key) + "}"
        path = path.replace(placeholder, _text_of(value_of(binding)), 1)
    return path


def _build_query(bindings: Iterable[ParameterBinding], value_of) -> Dict[str, str]:
    query: Dict[str, str] = {}
    for binding in bindings:
        value = value_of(binding)
        if value is None or (binding.omit_if_empty and is_empty(value)):
            continue
        query[encode_uri_component(str(binding.key))] = encode_uri_component(
            _text_of(value)
        )
    return query


def _merge_headers(*layers: Mapping[str, str]) -> Dict[str, str]:
    # later layers override earlier ones in place; names compare case-insensitively
    headers: Dict[str, str] = {}
    for layer in layers:
        for key, value in layer.items():
            existing = next((k for k in headers if k.lower() == key.lower()), None)
            if existing is None:
                headers[key] = value
            else:
                headers = {
                    (key if k == existing else k): (value if k == existing else v)
                    for k, v in headers.items()
                }
    return headers
