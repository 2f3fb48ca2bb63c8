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

from pure_interface import Interface

from .data import FormFields, HTTPHeaderDict, HTTPResponse, RequestMethod

__all__ = [
    "IAuthorizer",
    "ITransport",
    "Timeout",
]

Timeout = int | float | tuple[int | float, int | float]
"""A total timeout in seconds, or a `(connect, read)` pair."""


class ITransport(Interface):
    """Sends HTTP requests on behalf of an `APIConnection`.

    A transport is shared by every request made through a connection. It holds its network resources from the first
    `open()` call until `close()` has been called once for every `open()`.
    """

    async def open(self) -> None:
        """Acquire network resources, or add a user to the resources already held."""
        ...  # pragma: no cover

    async def close(self) -> None:
        """Remove a user, releasing network resources once no users remain."""
        ...  # pragma: no cover

    async def request(
        self,
        method: RequestMethod,
        url: str,
        headers: HTTPHeaderDict | None = None,
        body: object | str | bytes | None = None,
        form: FormFields | None = None,
        timeout: Timeout | None = None,
    ) -> HTTPResponse:
        """Send a request and read the complete response.

        Redirects are returned to the caller, not followed.

        :param method: HTTP method.
        :param url: Absolute request URL.
        :param headers: Request headers.
        :param body: Request body. Text and bytes are sent as-is, other values are serialized as JSON.
        :param form: Fields of a `multipart/form-data` body. `FormFile` values are sent as file parts.
        :param timeout: Request timeout.

        :return: The response, whatever its status code.

        :raise ClientValueError: If both `body` and `form` are provided.
        :raise TransportError: If the request could not be completed.
        """
        ...  # pragma: no cover


class IAuthorizer(Interface):
    """Provides the headers that authorize each request."""

    async def get_default_headers(self) -> HTTPHeaderDict:
        """
        :return: Headers to send with every request.
        """
        ...  # pragma: no cover
