"""HTTP client construction for the Dynatrace API."""

from typing import Any, Optional

import aiohttp

import constants


def get_client(
    token: str,
    content_type: str,
    timeout: Optional[int] = None,
    verify_ssl: bool = True,
) -> aiohttp.ClientSession:
    """Create a client session that authenticates with a Dynatrace API token.

    Every request issued through the session carries the `Authorization` and
    `Content-Type` headers. A new session is created for each pipeline run and
    has to be closed by the caller, preferably with `async with`.

    Must be called from a running event loop.

    Parameters:
        token: Dynatrace API token.
        content_type: Content type of the request bodies.
        timeout: Total request timeout in seconds; aiohttp default when None.
        verify_ssl: Verify TLS certificate of the environment.

    Returns:
        aiohttp.ClientSession: Configured client session.
    """
    headers = {
        "Authorization": f"{constants.API_TOKEN_SCHEME} {token}",
        "Content-Type": content_type,
    }
    session_kwargs: dict[str, Any] = {}
    if timeout is not None:
        session_kwargs["timeout"] = aiohttp.ClientTimeout(total=timeout)
    return aiohttp.ClientSession(
        headers=headers,
        connector=aiohttp.TCPConnector(ssl=verify_ssl),
        **session_kwargs,
    )
