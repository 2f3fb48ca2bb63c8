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

from collections.abc import Mapping
from typing import Any, ClassVar

__all__ = [
    "BadRequestException",
    "ClientTypeError",
    "ClientValueError",
    "EmptyUploadResultError",
    "ForbiddenException",
    "GeneralizedAPIError",
    "GoneException",
    "MailhubAPIException",
    "MailhubClientException",
    "MissingFieldError",
    "NotFoundException",
    "TooManyRequestsException",
    "TransportError",
    "UnauthorizedException",
]


class MailhubClientException(Exception):
    """The base exception class for all mailhub client exceptions."""


class _WrappedError(MailhubClientException):
    """Wrapper for standard exceptions that occur while sending requests or parsing service responses."""

    def __init__(self, msg: str, caused_by: Exception | None = None):
        """
        :param msg: The exception message.
        :param caused_by: The original error, if any.
        """
        self.caused_by = caused_by
        full_msg = msg
        if caused_by:
            full_msg = f"{msg}: {str(caused_by)}"
        super(_WrappedError, self).__init__(full_msg)


class TransportError(_WrappedError):
    """Wraps errors raised by the underlying HTTP transport."""


class ClientTypeError(_WrappedError, TypeError):
    """Raised when an operation or function is applied to an object of inappropriate type.
    The associated value is a string giving details about the type mismatch.
    """

    def __init__(
        self,
        msg: str,
        caused_by: Exception | None = None,
        valid_classes: tuple[type, ...] | None = None,
    ):
        """
        :param msg: The exception message.
        :param caused_by: The original error, if any.
        :param valid_classes: The classes that the current item should be an instance of.
        """
        super(ClientTypeError, self).__init__(msg, caused_by)
        self.valid_classes = valid_classes


class ClientValueError(_WrappedError, ValueError):
    """Raised when an operation or function receives an argument that has the right type but an inappropriate value,
    and the situation is not described by a more precise exception such as IndexError.
    """


class MissingFieldError(ClientValueError):
    """Raised when a resource operation requires an attribute that has not been set."""

    def __init__(self, field: str, msg: str | None = None):
        """
        :param field: The name of the missing attribute.
        :param msg: The exception message. A default message naming the field is used if omitted.
        """
        super().__init__(msg or f"Please define the '{field}' attribute")
        self.field = field


class EmptyUploadResultError(MailhubClientException):
    """Raised when the service acknowledges an upload but does not describe any uploaded file."""


class MailhubAPIException(MailhubClientException):
    """Base class for all service errors."""

    def __init__(self, status: int, reason: str | None, content: object | None, headers: Mapping[str, str] | None):
        """
        :param status: HTTP status code.
        :param reason: Reason.
        :param content: Deserialized content from the response.
        :param headers: Response headers.
        """
        self.status = status
        self.reason = reason
        self.content = content
        self.headers = headers

    @property
    def message(self) -> str | None:
        """The human-readable error message provided by the service, if any."""
        if isinstance(self.content, dict) and "message" in self.content:
            return str(self.content["message"])
        return None

    @property
    def type_(self) -> str | None:
        """The error type provided by the service, if any."""
        if isinstance(self.content, dict) and "type" in self.content:
            return str(self.content["type"])
        return None

    def __str__(self) -> str:
        error_message = f"({self.status})"
        if reason := self.reason:
            error_message += f" {reason}"
        if message := self.message:
            error_message += f"\n{message}"
        elif content := self.content:
            error_message += f"\n{content}"
        return error_message


class GeneralizedAPIError(MailhubAPIException):
    """Base class for service errors that should be generalized based on status code.

    Generalized error types must subclass GeneralizedAPIError and define the class attribute `STATUS_CODE`, which will
    be used to map service error codes to the corresponding generalization.
    """

    __GENERALIZED_TYPES: dict[int, type[GeneralizedAPIError]] = {}

    STATUS_CODE: ClassVar[int]

    @classmethod
    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        status_code = getattr(cls, "STATUS_CODE", None)
        if not isinstance(status_code, int):
            raise ValueError(f"{cls} must define an integer STATUS_CODE.")
        if existing_cls := GeneralizedAPIError.__GENERALIZED_TYPES.get(status_code):
            raise ValueError(f"Duplicated STATUS_CODE between {cls} and {existing_cls}")
        GeneralizedAPIError.__GENERALIZED_TYPES[status_code] = cls

    @staticmethod
    def from_status_code(status_code: int) -> type[MailhubAPIException]:
        """Get the error type for a status code.

        :param status_code: The status code of the error response.

        :return: The generalized implementation for the requested status code, or MailhubAPIException if there is none.
        """
        return GeneralizedAPIError.__GENERALIZED_TYPES.get(status_code, MailhubAPIException)


class BadRequestException(GeneralizedAPIError):
    """The service cannot process the request due to a client error (400 - Bad Request)."""

    STATUS_CODE = 400


class UnauthorizedException(GeneralizedAPIError):
    """The client must authenticate to get a response (401 - Unauthorized)."""

    STATUS_CODE = 401


class ForbiddenException(GeneralizedAPIError):
    """The client does not have access rights to the content (403 - Forbidden)."""

    STATUS_CODE = 403


class NotFoundException(GeneralizedAPIError):
    """The service could not find the requested resource (404 - Not Found)."""

    STATUS_CODE = 404


class GoneException(GeneralizedAPIError):
    """The requested resource is deleted (410 - Gone)."""

    STATUS_CODE = 410


class TooManyRequestsException(GeneralizedAPIError):
    """The client has sent too many requests in a given amount of time (429 - Too Many Requests)."""

    STATUS_CODE = 429
