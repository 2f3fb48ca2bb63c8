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
import unittest
from collections.abc import Mapping
from unittest import mock
from urllib.parse import urljoin

from ..connection import AccessTokenAuthorizer, APIConnection
from ..data import FormFields, HTTPHeaderDict, HTTPResponse, RequestMethod
from ..interfaces import ITransport, Timeout
from .consts import ACCESS_TOKEN, BASE_URL


def make_response(
    status: int = 200,
    body: bytes | str | object = b"",
    *,
    headers: Mapping[str, str] | None = None,
    reason: str | None = None,
) -> HTTPResponse:
    """Build a response for a `TestTransport` to return.

    Text bodies are utf-8 encoded. Any other body that is not bytes is serialized as JSON, with a matching
    `Content-Type` unless `headers` sets one.
    """
    headers = HTTPHeaderDict(headers or {})
    match body:
        case bytes():
            data = body
        case str():
            data = body.encode("utf-8")
        case _:
            headers.setdefault("Content-Type", "application/json")
            data = json.dumps(body).encode("utf-8")
    return HTTPResponse(status=status, reason=reason, headers=headers, data=data)


class TestTransport(mock.AsyncMock):
    """An `ITransport` double that records every request and returns a fixed response.

    Until `respond_with()` is called, every request receives a 503 response.
    """

    __test__ = False

    request: mock.AsyncMock

    def __init__(self, *, base_url: str = BASE_URL) -> None:
        super().__init__(spec=ITransport)
        self._base_url = base_url
        self.respond_with(make_response(503))

    def respond_with(self, response: HTTPResponse) -> HTTPResponse:
        self.request.side_effect = None
        self.request.return_value = response
        return response

    def assert_request_made(
        self,
        method: RequestMethod,
        path: str = "",
        headers: Mapping[str, str] | None = None,
        body: object | str | bytes | None = None,
        form: FormFields | None = None,
        timeout: Timeout | None = None,
    ) -> None:
        """Assert that the last request matches the arguments. `path` is relative to the base URL."""
        self.request.assert_called_with(
            method=method,
            url=urljoin(self._base_url, path.lstrip("/")),
            headers=HTTPHeaderDict(headers or {}),
            body=body,
            form=form,
            timeout=timeout,
        )

    def assert_no_requests(self) -> None:
        self.request.assert_not_called()


class TestWithConnection(unittest.IsolatedAsyncioTestCase):
    """Test case with a `connection` that sends its requests to a `TestTransport`."""

    def setUp(self) -> None:
        self.transport = TestTransport()
        self.authorizer = AccessTokenAuthorizer(ACCESS_TOKEN)
        self.connection = APIConnection(BASE_URL, self.transport, self.authorizer)

    def assert_request_made(
        self,
        method: RequestMethod,
        path: str = "",
        headers: Mapping[str, str] | None = None,
        body: object | str | bytes | None = None,
        form: FormFields | None = None,
        timeout: Timeout | None = None,
    ) -> None:
        """Assert that the last request matches the arguments.

        The bearer token and the connection's additional headers are expected as well as `headers`.
        """
        expected_headers = HTTPHeaderDict({"Authorization": f"Bearer {ACCESS_TOKEN}"})
        expected_headers.update(self.connection._additional_headers or {})
        expected_headers.update(headers or {})
        self.transport.assert_request_made(method, path, expected_headers, body, form, timeout)
