from logging import getLogger
from typing import Optional, Protocol

import httpx

from ._response import Response
from ._utils import RequestDescriptor, to_httpx_auth
from ._utils.constants import LOGGER_NAME
from .models.errors import TransportError


class RequestExecutor(Protocol):
    """Performs exactly one network exchange for a request descriptor.

    Implementations return a ``Response`` for every completed exchange,
    whatever its status, and raise ``TransportError`` when no exchange took
    place. They never retry and never follow redirects.
    """

    def execute(self, descriptor: RequestDescriptor) -> Response: ...


class HttpxExecutor:
    """``RequestExecutor`` backed by ``httpx``.

    A fresh ``httpx.Client`` is opened for each exchange and closed before
    returning, so no connection outlives the call.
    """

    def __init__(self, transport: Optional[httpx.BaseTransport] = None) -> None:
        self._transport = transport
        self._logger = getLogger(LOGGER_NAME)

    def execute(self, descriptor: RequestDescriptor) -> Response:
        timeout = httpx.Timeout(
            descriptor.timeout,
            connect=(
                descriptor.connect_timeout
                if descriptor.connect_timeout is not None
                else descriptor.timeout
            ),
        )

        try:
            with httpx.Client(
                transport=self._transport,
                follow_redirects=False,
                timeout=timeout,
            ) as client:
                response = client.request(
                    descriptor.method,
                    descriptor.url,
                    headers=descriptor.header_pairs(),
                    content=descriptor.body,
                    auth=to_httpx_auth(descriptor.auth),
                )
        except (httpx.RequestError, httpx.InvalidURL) as e:
            self._logger.debug(
                f"Transport failure for {descriptor.method} {descriptor.url}: {e}"
            )
            raise TransportError(
                str(e) or type(e).__name__, url=descriptor.url
            ) from e

        return Response(response.status_code, _raw_headers(response), response.content)


def _raw_headers(response: httpx.Response) -> dict[str, str]:
    # httpx lowercases keys on iteration; the raw list keeps the server's casing.
    encoding = response.headers.encoding
    headers: dict[str, str] = {}
    for key, value in response.headers.raw:
        headers[key.decode(encoding).strip()] = value.decode(encoding).strip()
    return headers
