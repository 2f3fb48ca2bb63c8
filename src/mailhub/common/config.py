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

import os
from dataclasses import dataclass, field
from pathlib import Path

import dotenv

from mailhub import logging

from .connection import AccessTokenAuthorizer, APIConnection, NoAuth
from .exceptions import ClientValueError
from .interfaces import ITransport
from .utils import get_header_metadata, get_package_details

__all__ = [
    "ClientConfig",
    "create_connection",
]

logger = logging.getLogger("config")

_ENV_PREFIX = "MAILHUB_"


def _default_user_agent() -> str:
    package_details = get_package_details(__name__)
    return f"{package_details.name}/{package_details.version}"


@dataclass(frozen=True, kw_only=True)
class ClientConfig:
    """Settings used to connect to the API."""

    api_server: str
    """The base URL of the API server."""

    access_token: str | None = None
    """A bearer token to send with every request, if any."""

    request_timeout: float | None = None
    """Total timeout for each request, in seconds. None means no timeout."""

    user_agent: str = field(default_factory=_default_user_agent)
    """The value to provide in the `User-Agent` header."""

    def __repr__(self) -> str:
        token = None if self.access_token is None else "*****"
        return (
            f"{self.__class__.__name__}(api_server={self.api_server!r}, access_token={token!r}, "
            f"request_timeout={self.request_timeout!r}, user_agent={self.user_agent!r})"
        )

    @classmethod
    def from_env(cls, dotenv_path: str | Path | None = None) -> ClientConfig:
        """Load settings from a `.env` file and the process environment.

        Values in the process environment take precedence over values in the `.env` file.

        :param dotenv_path: Path to the `.env` file. If None, `.env` is searched for from the working directory.

        :return: The loaded settings.

        :raises ClientValueError: If the API server is not configured, or the request timeout is not a number.
        """
        if dotenv_path is None:
            dotenv_path = dotenv.find_dotenv(usecwd=True)
        logger.debug(f"Loading settings from {dotenv_path or 'the environment'}")
        values = dict(os.environ)
        if dotenv_path:
            values = {**dotenv.dotenv_values(dotenv_path, encoding="utf-8"), **values}

        def get(key: str) -> str | None:
            return values.get(_ENV_PREFIX + key) or None

        if (api_server := get("API_SERVER")) is None:
            raise ClientValueError(f"{_ENV_PREFIX}API_SERVER is not set")

        request_timeout = None
        if (raw_timeout := get("REQUEST_TIMEOUT")) is not None:
            try:
                request_timeout = float(raw_timeout)
            except ValueError as e:
                raise ClientValueError(f"Invalid {_ENV_PREFIX}REQUEST_TIMEOUT", caused_by=e)

        optional = {}
        if (user_agent := get("USER_AGENT")) is not None:
            optional["user_agent"] = user_agent

        return cls(
            api_server=api_server,
            access_token=get("ACCESS_TOKEN"),
            request_timeout=request_timeout,
            **optional,
        )


def create_connection(config: ClientConfig, transport: ITransport | None = None) -> APIConnection:
    """Create a connection from the provided settings.

    :param config: The connection settings.
    :param transport: The transport to use. An `AioTransport` is created if omitted.

    :return: A connection to the configured API server.
    """
    if transport is None:
        from mailhub.aio import AioTransport

        transport = AioTransport(user_agent=config.user_agent)

    authorizer = NoAuth if config.access_token is None else AccessTokenAuthorizer(config.access_token)
    return APIConnection(
        base_url=config.api_server,
        transport=transport,
        authorizer=authorizer,
        additional_headers=get_header_metadata(__name__),
        request_timeout=config.request_timeout,
    )
