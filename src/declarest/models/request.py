import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class RequestDescriptor:
    """A fully resolved request, ready to be handed to a transport.

    ``query`` holds keys and values that are already percent-encoded, so a
    transport must join them as they are rather than encode them again.
    ``body`` is the JSON-encoded payload, or ``None`` when the operation has
    no body.
    """

    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    query: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None

    @property
    def query_string(self) -> str:
        return "&".join(f"{key}={value}" for key, value in self.query.items())

    @property
    def full_url(self) -> str:
        if not self.query:
            return self.url
        separator = "&" if "?" in self.url else "?"
        return f"{self.url}{separator}{self.query_string}"

    def replace(self, **changes: Any) -> "RequestDescriptor":
        """Return a copy with ``changes`` applied; mappings are copied too."""
        changes.setdefault("headers", dict(self.headers))
        changes.setdefault("query", dict(self.query))
        return dataclasses.replace(self, **changes)
