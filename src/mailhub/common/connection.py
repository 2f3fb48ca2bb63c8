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

import json
import re
from collections.abc import Mapping
from types import TracebackType
from typing import Any
from urllib.parse import urlencode

from mailhub import logging

from .data import DownloadResponse, FormFields, FormFile, HTTPHeaderDict, HTTPResponse, RequestOptions
from .exceptions import ClientTypeError, GeneralizedAPIError
from .interfaces import IAuthorizer, ITransport, Timeout

logger = logging.getLogger("connection")

__all__ = [
    "AccessTokenAuthorizer",
    "APIConnection",
    "NoAuth",
]

_RE_CHARSET = re.compile(r"charset=([a-zA-Z\-\d]+)[\s;]?")


class _NoAuth(IAuthorizer):
    """An authorizer that does not provide any authentication."""

    async def get_default_headers(self) -> HTTPHeaderDict:
        """Return an empty header dictionary."""
        return HTTPHeaderDict()


NoAuth = _NoAuth()
"""An authorizer that does not provide any authentication."""


class AccessTokenAuthorizer(IAuthorizer):
    def __init__(self, access_token: str) -> None:
        """An authorizer that sends the provided access token as a bearer token.

        This authorizer does not make any attempt to refresh expired tokens.

        :param access_token: The access token.
        """
        self._access_token = access_token

    async def get_default_headers(self) -> HTTPHeaderDict:
        return HTTPHeaderDict({"Authorization": f"Bearer {self._access_token}"})


class APIConnection:
    """Sends requests described by `RequestOptions` and decodes the responses."""

    def __init__(
        self,
        base_url: str,
        transport: ITransport,
        authorizer: IAuthorizer = NoAuth,
        additional_headers: Mapping[str, str] | None = None,
        request_timeout: Timeout | None = None,
    ) -> None:
        """
        :param base_url: The host URL of the API.
        :param transport: The transport to use for sending requests.
        :param authorizer: The authorizer to use for authenticating requests.
        :param additional_headers: Additional headers to include in each request.
        :param request_timeout: Timeout setting for every request. If one number is provided, it will be the
            total request timeout. It can also be a pair (tuple) of (connection, read) timeouts.
        """
        self._base_url = base_url.rstrip("/")
        self._transport = transport
        self._authorizer = authorizer
        self._additional_headers = additional_headers
        self._request_timeout = request_timeout

    @property
    def base_url(self) -> str:
        """The base_url of the connected API."""
        return self._base_url + "/"

    @property
    def transport(self) -> ITransport:
        """The transport used to send requests."""
        return self._transport

    async def open(self) -> None:
        """Open the HTTP transport."""
        await self._transport.open()

    async def close(self) -> None:
        """Close the HTTP transport."""
        await self._transport.close()

    async def __aenter__(self) -> APIConnection:
        await self.open()
        return self

    async def __aexit__(
        self, exc_type: type[Exception] | None, exc_val: Exception | None, exc_tb: TracebackType | None
    ) -> None:
        await self.close()

    async def request(self, options: RequestOptions) -> Any:
        """Send a request and decode the response.

        Errors raised by `ITransport.request` are not handled by this method.

        :param options: The request descriptor.

        :return: A `DownloadResponse` for download-style requests. Otherwise, the decoded JSON response, or the
            response text (bytes if `options.encoding` is None) if the response is not JSON.

        :raise BadRequestException: If the server responds with HTTP status 400.
        :raise UnauthorizedException: If the server responds with HTTP status 401.
        :raise ForbiddenException: If the server responds with HTTP status 403.
        :raise NotFoundException: If the server responds with HTTP status 404.
        :raise MailhubAPIException: If the server responds with any other HTTP status between 400 and 599.
        """
        # Each request holds its own handle on the shared transport.
        async with self:
            resource_url = self._build_url(options.path, options.query)
            headers = await self._build_headers(options)
            form = self._form_fields(options.form_data) if options.form_data else None

            logger.debug(f"Making {options.method} request to {resource_url}")
            response = await self._transport.request(
                method=options.method,
                url=resource_url,
                headers=headers,
                body=options.body,
                form=form,
                timeout=self._request_timeout,
            )

        if 400 <= response.status <= 599:
            error_type = GeneralizedAPIError.from_status_code(response.status)
            raise error_type(
                status=response.status,
                reason=response.reason,
                content=self._decode(response, "utf-8"),
                headers=response.headers,
            )

        if options.download_request:
            logger.debug(f"Received {len(response.data)} bytes from {resource_url}")
            body = response.data if options.encoding is None else response.data.decode(options.encoding)
            return DownloadResponse(
                status=response.status,
                reason=response.reason,
                headers=response.headers,
                body=body,
            )

        return self._decode(response, options.encoding)

    def _build_url(self, path: str, query: Mapping[str, Any] | None) -> str:
        """Join the resource path to the base URL and encode query parameters.

        :param path: The resource path.
        :param query: Query parameters. Parameters with a value of None are omitted.

        :return: The full resource URL.
        """
        resource_url = self._base_url + "/" + path.lstrip("/")
        if query and (params := [(key, value) for key, value in query.items() if value is not None]):
            resource_url += "?" + urlencode(params)
        return resource_url

    async def _build_headers(self, options: RequestOptions) -> HTTPHeaderDict:
        headers = await self._authorizer.get_default_headers()
        headers.update(self._additional_headers or {})
        if options.json and not options.download_request:
            headers["Accept"] = "application/json"
        if options.json and options.body is not None:
            headers["Content-Type"] = "application/json"
        return headers

    @staticmethod
    def _form_fields(form_data: Mapping[str, FormFile | str]) -> FormFields:
        """Flatten a multipart form description into transport form fields.

        :param form_data: Mapping of form field names to values.

        :return: The form fields as a list of tuples.

        :raises ClientTypeError: If a field value is not a supported type.
        """
        fields = []
        for name, value in form_data.items():
            if not isinstance(value, (FormFile, str, bytes)):
                raise ClientTypeError(
                    msg=f"Form field '{name}' could not be serialized.", valid_classes=(FormFile, str, bytes)
                )
            fields.append((name, value))
        return fields

    @staticmethod
    def _decode(response: HTTPResponse, encoding: str | None) -> Any:
        """Decode the response body, parsing it as JSON if possible.

        :param response: The HTTP response.
        :param encoding: The text encoding of the body. A charset declared by the response takes precedence. If
            None, the body is not decoded as text.

        :return: The decoded JSON value, or the body itself if it is not JSON.
        """
        if encoding is None:
            response_data = response.data
        else:
            content_type = response.getheader("content-type")
            if content_type is not None and (match := _RE_CHARSET.search(content_type)):
                encoding = match.group(1)
            response_data = response.data.decode(encoding)

        try:
            return json.loads(response_data)
        except ValueError:
            return response_data  # data must not be JSON formatted.
