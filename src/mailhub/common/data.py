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

import enum
import io
from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "DownloadResponse",
    "FormFile",
    "FormFields",
    "HTTPHeaderDict",
    "HTTPResponse",
    "RequestMethod",
    "RequestOptions",
]


class RequestMethod(str, enum.Enum):
    """HTTP methods used by the files API."""

    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"

    def __str__(self) -> str:
        return self.value


class HTTPHeaderDict(MutableMapping[str, str]):
    """HTTP header fields, keyed by lower-case field name.

    Lookups ignore case. Assigning a field replaces its value, while `add()` appends to it.
    """

    def __init__(self, fields: Mapping[str, str] | Iterable[tuple[str, str]] = ()) -> None:
        self._fields: dict[str, str] = {}
        for name, value in fields.items() if isinstance(fields, Mapping) else fields:
            self.add(name, value)

    def add(self, name: str, value: str) -> None:
        """Add a field value, joining it to any existing value for the same field with a comma."""
        key = name.lower()
        self._fields[key] = f"{self._fields[key]}, {value}" if key in self._fields else value

    def __getitem__(self, name: str) -> str:
        return self._fields[name.lower()]

    def __setitem__(self, name: str, value: str) -> None:
        self._fields[name.lower()] = value

    def __delitem__(self, name: str) -> None:
        del self._fields[name.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._fields!r})"


@dataclass(frozen=True, kw_only=True)
class HTTPResponse:
    """A complete HTTP response, as received by a transport."""

    status: int
    data: bytes = b""
    reason: str | None = None
    headers: HTTPHeaderDict = field(default_factory=HTTPHeaderDict)

    def getheader(self, name: str, default: str | None = None) -> str | None:
        return self.headers.get(name, default)


@dataclass(frozen=True, kw_only=True)
class DownloadResponse:
    """The response to a download-style request."""

    headers: Mapping[str, str]
    """The response headers."""

    body: bytes | str
    """The response payload. Raw bytes unless the request asked for the payload to be decoded."""

    status: int = 200
    """The HTTP status code."""

    reason: str | None = None
    """The HTTP reason phrase."""

    def open_stream(self) -> io.BytesIO:
        """Open a readable binary stream over the response payload.

        Text payloads are encoded as utf-8.

        :return: A binary stream positioned at the start of the payload.
        """
        body = self.body.encode("utf-8") if isinstance(self.body, str) else self.body
        return io.BytesIO(body)


@dataclass(frozen=True, kw_only=True)
class FormFile:
    """A file part in a multipart form request."""

    value: bytes | str
    """The file content."""

    filename: str
    """The filename reported for the part."""

    content_type: str
    """The MIME type of the part."""


FormFields = list[tuple[str, str | bytes | FormFile]]
"""Multipart form fields, in the order they are sent."""


@dataclass(frozen=True, kw_only=True)
class RequestOptions:
    """Describes a single request to be sent by `APIConnection.request()`."""

    path: str
    """The resource path, relative to the API server."""

    method: RequestMethod = RequestMethod.GET
    """HTTP request method."""

    json: bool = True
    """Whether the request speaks JSON. When False, no `Accept` header is sent and any body is sent as-is."""

    query: Mapping[str, Any] | None = None
    """Query parameters. Parameters with a value of None are omitted."""

    body: object | str | bytes | None = None
    """Request body."""

    form_data: Mapping[str, FormFile | str] | None = None
    """Multipart form fields."""

    encoding: str | None = "utf-8"
    """The text encoding of the response body. None means the body is returned as raw bytes."""

    download_request: bool = False
    """Whether the response should be returned as a `DownloadResponse` instead of being decoded."""
