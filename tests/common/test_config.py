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

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from mailhub.aio import AioTransport
from mailhub.common import AccessTokenAuthorizer, APIConnection, ClientConfig, NoAuth, create_connection
from mailhub.common.exceptions import ClientValueError
from mailhub.common.test_tools import TestTransport
from mailhub.common.utils import get_header_metadata


class TestClientConfig(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp_dir.cleanup)
        self.dotenv_path = Path(self.tmp_dir.name) / ".env"
        self.dotenv_path.write_text(
            'MAILHUB_API_SERVER="https://dotenv.example.com"\nMAILHUB_ACCESS_TOKEN="dotenv-token"\n',
            encoding="utf-8",
        )
        patcher = mock.patch.dict(os.environ, clear=True)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_from_dotenv(self) -> None:
        config = ClientConfig.from_env(self.dotenv_path)
        self.assertEqual("https://dotenv.example.com", config.api_server)
        self.assertEqual("dotenv-token", config.access_token)
        self.assertIsNone(config.request_timeout)
        self.assertTrue(config.user_agent)

    def test_environment_takes_precedence(self) -> None:
        os.environ["MAILHUB_API_SERVER"] = "https://env.example.com"
        os.environ["MAILHUB_REQUEST_TIMEOUT"] = "2.5"
        os.environ["MAILHUB_USER_AGENT"] = "test-agent"
        config = ClientConfig.from_env(self.dotenv_path)
        self.assertEqual("https://env.example.com", config.api_server)
        self.assertEqual("dotenv-token", config.access_token)
        self.assertEqual(2.5, config.request_timeout)
        self.assertEqual("test-agent", config.user_agent)

    def test_missing_api_server(self) -> None:
        self.dotenv_path.write_text('MAILHUB_ACCESS_TOKEN="dotenv-token"\n', encoding="utf-8")
        with self.assertRaises(ClientValueError):
            ClientConfig.from_env(self.dotenv_path)

    def test_invalid_timeout(self) -> None:
        os.environ["MAILHUB_REQUEST_TIMEOUT"] = "soon"
        with self.assertRaises(ClientValueError) as cm:
            ClientConfig.from_env(self.dotenv_path)
        self.assertIsInstance(cm.exception.caused_by, ValueError)

    def test_repr_hides_access_token(self) -> None:
        config = ClientConfig(api_server="https://api.example.com", access_token="secret", user_agent="agent")
        self.assertNotIn("secret", repr(config))


class TestCreateConnection(unittest.TestCase):
    def test_with_access_token(self) -> None:
        transport = TestTransport()
        config = ClientConfig(api_server="https://api.example.com", access_token="abc", request_timeout=5)
        connection = create_connection(config, transport=transport)
        self.assertIsInstance(connection, APIConnection)
        self.assertEqual("https://api.example.com/", connection.base_url)
        self.assertIs(transport, connection.transport)
        self.assertIsInstance(connection._authorizer, AccessTokenAuthorizer)
        self.assertEqual(5, connection._request_timeout)
        self.assertEqual(get_header_metadata("mailhub.common.config"), connection._additional_headers)

    def test_without_access_token(self) -> None:
        connection = create_connection(ClientConfig(api_server="https://api.example.com"))
        self.assertIsInstance(connection.transport, AioTransport)
        self.assertIs(NoAuth, connection._authorizer)
