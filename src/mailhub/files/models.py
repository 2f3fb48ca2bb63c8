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

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, ValidationError

from mailhub import logging
from mailhub.common.exceptions import ClientTypeError, ClientValueError

if TYPE_CHECKING:
    from .resource import FileResource

__all__ = [
    "FileModel",
    "hydrate",
]

logger = logging.getLogger("files.models")


class FileModel(BaseModel):
    """The wire representation of a file."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    object: str | None = None
    account_id: str | None = None
    filename: str | None = None
    content_type: str | None = None
    size: int | None = None
    message_ids: list[str] | None = None
    content_id: str | None = None


def hydrate(resource: FileResource, payload: Any, rebind: bool = False) -> FileResource:
    """Populate a file resource from a decoded server response.

    Only the fields present in the payload are assigned. Other attributes keep their current values.

    :param resource: The resource to update.
    :param payload: A decoded JSON object describing the file.
    :param rebind: Allow the payload to replace a server-assigned id. Used when the payload describes a new file.

    :return: The same resource instance.

    :raises ClientTypeError: If the payload is not a JSON object.
    :raises ClientValueError: If the payload does not describe a valid file, or it would change the server-assigned id.
    """
    if not isinstance(payload, dict):
        raise ClientTypeError(msg=f"Cannot hydrate a file from '{type(payload).__name__}'.", valid_classes=(dict,))
    try:
        model = FileModel.model_validate(payload)
    except ValidationError as e:
        raise ClientValueError(msg="Could not deserialize file", caused_by=e)

    fields = model.model_dump(exclude_unset=True)
    if "id" in fields:
        resource._assign_server_id(fields.pop("id"), rebind=rebind)
    for name, value in fields.items():
        setattr(resource, name, value)
    logger.debug(f"Hydrated file {resource.id} with {sorted(fields)}")
    return resource
