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

import re
from collections.abc import Awaitable
from typing import Any, ClassVar

from mailhub import logging
from mailhub.common import APIConnection, DownloadResponse, FormFile, RequestMethod, RequestOptions
from mailhub.common.exceptions import ClientTypeError, ClientValueError, EmptyUploadResultError, MissingFieldError
from mailhub.common.utils import Callback, notify

from .models import FileModel, hydrate

__all__ = [
    "FileDownload",
    "FileResource",
    "filename_from_content_disposition",
]

logger = logging.getLogger("files.resource")

_RE_FILENAME = re.compile(r"filename=([^;]*)")
_DEFAULT_FILENAME = "filename"


def filename_from_content_disposition(value: str | None) -> str:
    """Extract the filename from a `Content-Disposition` header value.

    :param value: The header value, or None if the header is missing.

    :return: The filename, without surrounding quotes, or `"filename"` if no filename is declared.
    """
    if value and (match := _RE_FILENAME.search(value)):
        if filename := match.group(1).strip().strip('"'):
            return filename
    return _DEFAULT_FILENAME


class FileDownload(dict[str, Any]):
    """A downloaded file: the response headers, plus the payload under the `"body"` key.

    Header names are lower-case. A response header named `body` is replaced by the payload.
    """

    @property
    def body(self) -> bytes | str:
        """The file content."""
        return self["body"]

    @property
    def filename(self) -> str:
        """The filename declared by the `Content-Disposition` header, or `"filename"` if there is none."""
        return filename_from_content_disposition(self.get("content-disposition"))


class FileResource:
    """A file stored by the email platform.

    Set `filename`, `content_type` and `data` to upload a new file, or provide the `id` of an existing file to
    fetch its metadata or download it.

    Every operation accepts an optional `callback(error, result)`, which is called when the operation completes. The
    outcome is returned (or raised) whether a callback is provided or not.
    """

    collection_name: ClassVar[str] = "files"

    def __init__(
        self,
        connection: APIConnection,
        *,
        id: str | None = None,
        filename: str | None = None,
        content_type: str | None = None,
        data: bytes | str | None = None,
        size: int | None = None,
        message_ids: list[str] | None = None,
        content_id: str | None = None,
        account_id: str | None = None,
        object: str | None = None,
    ) -> None:
        """
        :param connection: The connection used to send requests.
        :param id: The ID of an existing file.
        :param filename: The name of the file.
        :param content_type: The MIME type of the file.
        :param data: The file content to upload.
        :param size: The size of the file in bytes.
        :param message_ids: IDs of the messages the file is attached to.
        :param content_id: The content ID of an inline attachment.
        :param account_id: The ID of the account that owns the file.
        :param object: The object type reported by the service.
        """
        self._connection = connection
        self._id = id
        self._server_id: str | None = None
        self.filename = filename
        self.content_type = content_type
        self.data = data
        self.size = size
        self.message_ids = message_ids
        self.content_id = content_id
        self.account_id = account_id
        self.object = object

    @property
    def connection(self) -> APIConnection:
        """The connection used to send requests."""
        return self._connection

    @property
    def id(self) -> str | None:
        """The ID of the file. The ID cannot be changed once it has been assigned by the service."""
        return self._id

    @id.setter
    def id(self, value: str | None) -> None:
        if self._server_id is not None and value != self._server_id:
            raise ClientValueError(f"Cannot change the ID of file {self._server_id}")
        self._id = value

    def _assign_server_id(self, value: str | None, rebind: bool = False) -> None:
        if value is None:
            return
        if rebind:
            self._server_id = None
        self.id = value
        self._server_id = value

    def to_json(self) -> dict[str, Any]:
        """Serialize the file attributes that have a value.

        The file content is not included.

        :return: A JSON-compatible dictionary, keyed by wire field names.
        """
        model = FileModel(
            id=self.id,
            object=self.object,
            account_id=self.account_id,
            filename=self.filename,
            content_type=self.content_type,
            size=self.size,
            message_ids=self.message_ids,
            content_id=self.content_id,
        )
        return model.model_dump(mode="json", exclude_none=True)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.to_json()!r})"

    def _require(self, *names: str) -> None:
        """Check that attributes are set, in order.

        :raises MissingFieldError: For the first attribute that is not set.
        """
        for name in names:
            if not getattr(self, name):
                raise MissingFieldError(name)

    @property
    def _path(self) -> str:
        return f"/{self.collection_name}/{self.id}"

    async def upload(self, callback: Callback | None = None) -> FileResource:
        """Upload the file content.

        The service assigns an ID to the uploaded file, and the attributes of this resource are updated from the
        service response. Uploading again creates another file, and this resource is rebound to its ID.

        :param callback: Optional function that is called with `(error, result)` when the upload completes.

        :return: This resource.

        :raises MissingFieldError: If `filename`, `data` or `content_type` is not set. The callback is not called.
        :raises EmptyUploadResultError: If the service response does not describe any file.
        """
        self._require("filename", "data", "content_type")
        return await notify(callback, self._upload())

    async def _upload(self) -> FileResource:
        response = await self._connection.request(
            RequestOptions(
                method=RequestMethod.POST,
                path=f"/{self.collection_name}",
                json=False,
                form_data={
                    "file": FormFile(value=self.data, filename=self.filename, content_type=self.content_type),
                },
            )
        )
        if not isinstance(response, list):
            raise ClientTypeError(msg="Expected a list of uploaded files.", valid_classes=(list,))
        # A single uploaded file is always described by exactly one element.
        if len(response) == 0:
            raise EmptyUploadResultError(f"Upload of '{self.filename}' did not return any files")
        # Each upload creates a new file, so the resource is rebound to the new ID.
        hydrate(self, response[0], rebind=True)
        logger.debug(f"Uploaded {self.filename!r} as file {self.id}")
        return self

    async def metadata(self, callback: Callback | None = None) -> Any:
        """Get the metadata of the file.

        The response is returned as-is, and this resource is not updated.

        :param callback: Optional function that is called with `(error, result)` when the request completes.

        :return: The decoded service response.
        """
        return await notify(callback, self._connection.request(RequestOptions(path=self._path)))

    def _download(self) -> Awaitable[DownloadResponse]:
        """Start downloading the file.

        :raises MissingFieldError: If `id` is not set. This is raised before the request is created.
        """
        self._require("id")
        return self._connection.request(
            RequestOptions(path=f"{self._path}/download", encoding=None, download_request=True)
        )

    async def download(self, callback: Callback | None = None) -> FileDownload:
        """Download the file.

        :param callback: Optional function that is called with `(error, result)` when the download completes.

        :return: The response headers and the file content, in a single mapping. The content is under the `"body"`
            key.

        :raises MissingFieldError: If `id` is not set. The callback is not called.
        """
        return await notify(callback, self._collect(self._download()))

    async def _collect(self, download: Awaitable[DownloadResponse]) -> FileDownload:
        response = await download
        file = FileDownload((name.lower(), value) for name, value in response.headers.items())
        file["body"] = response.body
        logger.debug(f"Downloaded file {self.id} as {file.filename!r}")
        return file

    async def get_readable_stream(self, callback: Callback | None = None) -> DownloadResponse:
        """Download the file, without processing the response.

        Use `DownloadResponse.open_stream()` to read the content.

        :param callback: Optional function that is called with `(error, result)` when the download completes.

        :return: The download response.

        :raises MissingFieldError: If `id` is not set. The callback is not called.
        """
        return await notify(callback, self._download())
