import os
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict

from ._utils.constants import ENV_BASE_URL


class Config(BaseModel):
    """Client level settings shared by every operation of a client."""

    model_config = ConfigDict(frozen=True)

    base_url: Optional[str] = None
    default_headers: Optional[Dict[str, str]] = None

    @classmethod
    def from_env(cls, **overrides) -> "Config":
        """Build a config, falling back to ``DECLAREST_BASE_URL`` for the base URL."""
        if overrides.get("base_url") is None:
            overrides["base_url"] = os.getenv(ENV_BASE_URL)
        return cls(**overrides)
