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

from typing import Any

from mailhub import logging
from mailhub.common import APIConnection, RequestMethod, RequestOptions
from mailhub.common.exceptions import ClientTypeError

from .models import hydrate
from .resource import FileResource

logger = logging.getLogger("files.client")

__all__ = ["FilesClient"]


class FilesClient:
    """Finds, lists and deletes files, and creates new file resources."""

    def __init__(self, connection: APIConnection) -> None:
        """
        :param connection: The connection used to send requests.
        """
        self._connection = connection

    @property
    def _collection_path(self) -> str:
        return f"/{FileResource.collection_name}"

    def build(self, **attributes: Any) -> FileResource:
        """Create a new file resource that is bound to this client's connection.

        The file is not uploaded until `FileResource.upload()` is called.

        :param attributes: Initial attribute values.

        :return: The new file resource.
        """
        return FileResource(self._connection, **attributes)

    async def find(self, file_id: str) -> FileResource:
        """Get a file by its ID.

        :param file_id: The ID of the file.

        :return: A file resource populated from the service response.
        """
        response = await self._connection.request(RequestOptions(path=f"{self._collection_path}/{file_id}"))
        return hydrate(self.build(), response)

    async def list(
        self,
        offset: int = 0,
        limit: int = 100,
        filename: str | None = None,
        content_type: str | None = None,
        message_id: str | None = None,
    ) -> list[FileResource]:
        """List up to `limit` files, starting at `offset`.

        :param offset: The number of files to skip before listing.
        :param limit: Max number of files to list.
        :param filename: Only list files with this filename.
        :param content_type: Only list files with this MIME type.
        :param message_id: Only list files attached to this message.

        :return: The listed files.
        """
        assert limit > 0, "Limit must be a positive integer"
        assert offset >= 0, "Offset must be a non-negative integer"
        response = await self._connection.request(
            RequestOptions(
                path=self._collection_path,
                query={
                    "offset": offset,
                    "limit": limit,
                    "filename": filename,
                    "content_type": content_type,
                    "message_id": message_id,
                },
            )
        )
        if not isinstance(response, list):
            raise ClientTypeError(msg="Expected a list of files.", valid_classes=(list,))
        logger.debug(f"Listed {len(response)} files from offset {offset}")
        return [hydrate(self.build(), item) for item in response]

    async def delete(self, file_id: str) -> None:
        """Delete a file by its ID.

        :param file_id: The ID of the file to delete.
        """
        await self._connection.request(
            RequestOptions(method=RequestMethod.DELETE, path=f"{self._collection_path}/{file_id}")
        )
