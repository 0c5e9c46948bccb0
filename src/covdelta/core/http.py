"""httpx helpers shared by the remote adapters."""

from typing import Any

import httpx

from covdelta.core.errors import FetchError


def get_checked(client: httpx.Client, url: str, **kwargs: Any) -> httpx.Response:
    """GET a URL, mapping transport failures and non-2xx statuses to FetchError."""
    try:
        response = client.get(url, **kwargs)
    except httpx.HTTPError as e:
        raise FetchError.transport(url, str(e) or type(e).__name__) from e
    if not response.is_success:
        raise FetchError.http_status(url, response.status_code)
    return response


def json_body(response: httpx.Response) -> Any:
    """Decode a JSON response body, mapping failures to FetchError."""
    try:
        return response.json()
    except ValueError as e:
        raise FetchError.decode(str(response.request.url), str(e)) from e
