#  Copyright © 2025 Bentley Systems, Incorporated
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#      http://www.apache.org/licenses/LICENSE-2.0
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.

from __future__ import annotations

import asyncio
import json
from types import TracebackType

import aiohttp
from aiohttp.typedefs import StrOrURL

from mailhub.common import FormFields, FormFile, HTTPHeaderDict, HTTPResponse, RequestMethod
from mailhub.common.exceptions import ClientValueError, TransportError
from mailhub.common.interfaces import ITransport, Timeout
from mailhub.logging import getLogger

__all__ = ["AioTransport"]

logger = getLogger("aio.transport")


def _client_timeout(timeout: Timeout | None) -> aiohttp.ClientTimeout | None:
    match timeout:
        case None:
            return None
        case (connect, read):
            return aiohttp.ClientTimeout(sock_connect=connect, sock_read=read)
        case total:
            return aiohttp.ClientTimeout(total=total)


def _multipart(form: FormFields) -> aiohttp.FormData:
    data = aiohttp.FormData(quote_fields=False)
    for name, value in form:
        if isinstance(value, FormFile):
            data.add_field(name, value.value, filename=value.filename, content_type=value.content_type)
        else:
            data.add_field(name, value)
    return data


class AioTransport(ITransport):
    """An `ITransport` backed by a shared `aiohttp.ClientSession`.

    The session is created by the first `open()` and closed when every `open()` has been matched by a `close()`.
    """

    def __init__(
        self,
        user_agent: str,
        verify_ssl: bool = True,
        proxy: StrOrURL | None = None,
        close_grace_period_ms: int = 250,
    ) -> None:
        """
        :param user_agent: The `User-Agent` header sent with requests that do not set their own.
        :param verify_ssl: Verify SSL certificates. Only disable this for local testing.
        :param proxy: Proxy server to route requests through.
        :param close_grace_period_ms: Time to wait for SSL connections to shut down after the session is closed.
        """
        self._user_agent = user_agent
        self._verify_ssl = verify_ssl
        self._proxy = proxy
        self._close_grace_period = close_grace_period_ms / 1000
        self._session: aiohttp.ClientSession | None = None
        self._users = 0
        self._lock = asyncio.Lock()

    async def open(self) -> None:
        async with self._lock:
            if self._session is None:
                logger.debug("Starting HTTP session")
                self._session = aiohttp.ClientSession(
                    connector=aiohttp.TCPConnector(ssl=None if self._verify_ssl else False),
                    skip_auto_headers=["Accept", "Accept-Encoding"],
                )
            self._users += 1

    async def close(self) -> None:
        async with self._lock:
            if self._session is None:
                raise TransportError("Cannot close a transport that is not open.")
            self._users -= 1
            if self._users > 0:
                return
            session, self._session = self._session, None

        logger.debug("Closing HTTP session")
        await session.close()
        # https://docs.aiohttp.org/en/stable/client_advanced.html#graceful-shutdown
        await asyncio.sleep(self._close_grace_period)

    async def __aenter__(self) -> AioTransport:
        await self.open()
        return self

    async def __aexit__(
        self, exc_type: type[Exception] | None, exc_val: Exception | None, exc_tb: TracebackType | None
    ) -> None:
        await self.close()

    async def request(
        self,
        method: RequestMethod,
        url: str,
        headers: HTTPHeaderDict | None = None,
        body: object | str | bytes | None = None,
        form: FormFields | None = None,
        timeout: Timeout | None = None,
    ) -> HTTPResponse:
        if body is not None and form is not None:
            raise ClientValueError("A request cannot have both a body and form fields.")
        if self._session is None:
            raise TransportError("Cannot send a request before the transport is opened, or after it is closed.")

        headers = HTTPHeaderDict(headers or {})
        headers.setdefault("User-Agent", self._user_agent)
        if form is not None:
            # aiohttp sets the multipart content type, including the boundary.
            headers.pop("Content-Type", None)
            data = _multipart(form)
        elif body is None or isinstance(body, (str, bytes)):
            data = body
        else:
            headers.setdefault("Content-Type", "application/json")
            data = json.dumps(body)

        try:
            async with self._session.request(
                method=str(method),
                url=url,
                headers=headers,
                data=data,
                timeout=_client_timeout(timeout),
                allow_redirects=False,
                proxy=self._proxy,
            ) as response:
                return HTTPResponse(
                    status=response.status,
                    reason=response.reason,
                    headers=HTTPHeaderDict(response.headers),
                    data=await response.read(),
                )
        except (aiohttp.ClientError, TimeoutError) as e:
            raise TransportError("Could not complete HTTP request", caused_by=e)
