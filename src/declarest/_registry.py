"""Process-wide store of declared operations and their parameter bindings."""

import threading
from dataclasses import dataclass, field
from logging import getLogger
from typing import Dict, Iterator, List, Mapping, Optional, Union

from ._utils.constants import LOGGER_NAME
from .models import (
    DeclarationError,
    HttpMethod,
    MediaType,
    OperationDescriptor,
    OperationNotFoundError,
    ParameterBinding,
    ParameterRole,
)

logger = getLogger(LOGGER_NAME)


@dataclass
class _OperationEntry:
    method: Optional[HttpMethod] = None
    url_template: Optional[str] = None
    static_headers: Dict[str, str] = field(default_factory=dict)
    produces_json: bool = False
    bindings: List[ParameterBinding] = field(default_factory=list)


class OperationRegistry:
    """Append-only registry of operation metadata.

    Declarations for one operation may arrive in any order: bindings can be
    registered before the verb and URL template, and headers or media type
    before or after either. Reads go through :meth:`get`, which returns an
    immutable :class:`OperationDescriptor` snapshot.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._entries: Dict[str, _OperationEntry] = {}

    def _entry(self, operation_id: str) -> _OperationEntry:
        entry = self._entries.get(operation_id)
        if entry is None:
            entry = self._entries[operation_id] = _OperationEntry()
        return entry

    def register_operation(
        self,
        operation_id: str,
        method: Union[HttpMethod, str],
        url_template: str,
    ) -> None:
        method = HttpMethod(method.upper() if isinstance(method, str) else method)
        with self._lock:
            entry = self._entry(operation_id)
            if entry.method is not None and (
                entry.method != method or entry.url_template != url_template
            ):
                raise DeclarationError(
                    f"Operation '{operation_id}' is already declared as "
                    f"{entry.method.value} {entry.url_template}"
                )
            entry.method = method
            entry.url_template = url_template

    def register_headers(self, operation_id: str, headers: Mapping[str, str]) -> None:
        with self._lock:
            self._entry(operation_id).static_headers.update(
                {key: str(value) for key, value in headers.items()}
            )

    def register_produces(
        self, operation_id: str, media_type: Union[MediaType, str]
    ) -> None:
        with self._lock:
            self._entry(operation_id).produces_json = (
                MediaType(media_type) == MediaType.JSON
            )

    def register_binding(
        self,
        operation_id: str,
        role: Union[ParameterRole, str],
        key: Optional[str],
        position: int,
        *,
        omit_if_empty: bool = True,
    ) -> None:
        role = ParameterRole(role)
        if role != ParameterRole.BODY and not key:
            raise DeclarationError(
                f"A {role.value} binding of '{operation_id}' requires a key"
            )
        if position < 0:
            raise DeclarationError(
                f"Argument position must be non-negative, got {position}"
            )

        binding = ParameterBinding(
            role=role,
            key=None if role == ParameterRole.BODY else key,
            position=position,
            omit_if_empty=omit_if_empty,
        )

        with self._lock:
            bindings = self._entry(operation_id).bindings
            if binding in bindings:
                return

            if role == ParameterRole.BODY and any(
                existing.role == ParameterRole.BODY for existing in bindings
            ):
                raise DeclarationError(
                    f"Operation '{operation_id}' declares more than one body parameter"
                )

            if any(
                existing.role == role and existing.key == binding.key
                for existing in bindings
            ):
                logger.warning(
                    f"Operation '{operation_id}' binds {role.value} '{key}' "
                    "more than once"
                )

            bindings.append(binding)

    def get(self, operation_id: str) -> OperationDescriptor:
        with self._lock:
            entry = self._entries.get(operation_id)
            if entry is None:
                raise OperationNotFoundError(operation_id)
            if entry.method is None or entry.url_template is None:
                raise DeclarationError(
                    f"Operation '{operation_id}' has no HTTP method declared"
                )
            return OperationDescriptor(
                operation_id=operation_id,
                method=entry.method,
                url_template=entry.url_template,
                static_headers=dict(entry.static_headers),
                produces_json=entry.produces_json,
                bindings=tuple(entry.bindings),
            )

    def operation_ids(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._entries))

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, operation_id: object) -> bool:
        return operation_id in self._entries


registry = OperationRegistry()
