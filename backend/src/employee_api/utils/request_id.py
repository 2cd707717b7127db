"""Request ID helpers."""

import re
import uuid

REQUEST_ID_HEADER = "X-Request-ID"

_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def generate_request_id() -> str:
    """Generate a unique request ID for tracing.

    Returns:
        A UUID4 string
    """
    return str(uuid.uuid4())


def resolve_request_id(incoming: str | None) -> str:
    """Reuse a well-formed incoming request ID or generate a new one.

    Args:
        incoming: Value of the X-Request-ID header, if any

    Returns:
        Request ID to propagate
    """
    if incoming and _REQUEST_ID_PATTERN.match(incoming):
        return incoming
    return generate_request_id()
