import json
from contextlib import contextmanager
from typing import Generator

import httpx

from ..models.errors import HttpStatusError, TransportError


@contextmanager
def handle_errors() -> Generator[None, None, None]:
    """Context manager translating httpx failures into declarest errors.

    Yields:
        None: The context manager yields control to the wrapped code.

    Raises:
        HttpStatusError: For responses with a non-2xx status code.
        TransportError: When httpx could not complete the request.
    """
    try:
        yield
    except httpx.HTTPStatusError as e:
        response = e.response
        try:
            error_body = response.json()
        except ValueError:
            error_body = response.text

        message: str | None = None
        if isinstance(error_body, dict):
            message = (
                error_body.get("message")
                or error_body.get("error")
                or error_body.get("detail")
            )
            error_body = json.dumps(error_body)

        raise HttpStatusError(
            message or str(e),
            status_code=response.status_code,
            method=e.request.method,
            url=str(e.request.url),
            body=error_body if isinstance(error_body, str) else str(error_body),
        ) from e
    except httpx.RequestError as e:
        raise TransportError(f"{type(e).__name__}: {e}") from e
