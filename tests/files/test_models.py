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

import unittest
from unittest import mock

from parameterized import parameterized

from mailhub.common import APIConnection
from mailhub.common.exceptions import ClientTypeError, ClientValueError
from mailhub.files import FileResource, filename_from_content_disposition, hydrate


class TestHydrate(unittest.TestCase):
    def setUp(self) -> None:
        self.file = FileResource(
            mock.Mock(spec=APIConnection),
            filename="sample.txt",
            content_type="text/plain",
            data=b"Sample data",
        )

    def test_hydrate_returns_same_instance(self) -> None:
        self.assertIs(self.file, hydrate(self.file, {"id": "id-1234"}))
        self.assertEqual("id-1234", self.file.id)

    def test_hydrate_only_present_fields(self) -> None:
        hydrate(self.file, {"id": "id-1234", "size": 11, "message_ids": ["m1", "m2"]})
        self.assertEqual(11, self.file.size)
        self.assertEqual(["m1", "m2"], self.file.message_ids)
        self.assertEqual("sample.txt", self.file.filename)
        self.assertEqual("text/plain", self.file.content_type)
        self.assertEqual(b"Sample data", self.file.data)

    def test_hydrate_ignores_unknown_fields(self) -> None:
        hydrate(self.file, {"id": "id-1234", "data": "not the content", "unknown": 1})
        self.assertEqual(b"Sample data", self.file.data)
        self.assertFalse(hasattr(self.file, "unknown"))

    def test_hydrate_explicit_null(self) -> None:
        hydrate(self.file, {"content_id": None, "filename": None})
        self.assertIsNone(self.file.filename)
        self.assertIsNone(self.file.id)

    def test_hydrate_same_id_twice(self) -> None:
        hydrate(self.file, {"id": "id-1234"})
        hydrate(self.file, {"id": "id-1234", "size": 12})
        self.assertEqual(12, self.file.size)

    def test_hydrate_cannot_change_server_id(self) -> None:
        hydrate(self.file, {"id": "id-1234"})
        with self.assertRaises(ClientValueError):
            hydrate(self.file, {"id": "id-5678"})
        self.assertEqual("id-1234", self.file.id)

    def test_hydrate_rebind_replaces_server_id(self) -> None:
        hydrate(self.file, {"id": "id-1234"})
        hydrate(self.file, {"id": "id-5678", "size": 2}, rebind=True)
        self.assertEqual("id-5678", self.file.id)
        self.assertEqual(2, self.file.size)
        with self.assertRaises(ClientValueError):
            self.file.id = "id-1234"

    def test_local_id_can_be_replaced(self) -> None:
        self.file.id = "local"
        hydrate(self.file, {"id": "id-1234"})
        self.assertEqual("id-1234", self.file.id)

    @parameterized.expand(
        [
            ("list", [{"id": "id-1234"}]),
            ("string", "id-1234"),
            ("none", None),
        ]
    )
    def test_hydrate_not_an_object(self, _name: str, payload: object) -> None:
        with self.assertRaises(ClientTypeError):
            hydrate(self.file, payload)

    def test_hydrate_invalid_field(self) -> None:
        with self.assertRaises(ClientValueError):
            hydrate(self.file, {"size": "large"})
        self.assertIsNone(self.file.size)


class TestToJson(unittest.TestCase):
    def test_to_json(self) -> None:
        file = FileResource(
            mock.Mock(spec=APIConnection),
            id="id-1234",
            filename="sample.txt",
            content_type="text/plain",
            data=b"Sample data",
            size=11,
            message_ids=["m1"],
        )
        self.assertEqual(
            {
                "id": "id-1234",
                "filename": "sample.txt",
                "content_type": "text/plain",
                "size": 11,
                "message_ids": ["m1"],
            },
            file.to_json(),
        )

    def test_repr(self) -> None:
        file = FileResource(mock.Mock(spec=APIConnection), id="id-1234")
        self.assertEqual("FileResource({'id': 'id-1234'})", repr(file))


class TestFilenameFromContentDisposition(unittest.TestCase):
    @parameterized.expand(
        [
            ("missing", None, "filename"),
            ("plain", "attachment; filename=report.pdf", "report.pdf"),
            ("quoted", 'attachment; filename="report.pdf"', "report.pdf"),
            ("followed by params", "attachment; filename=report.pdf; size=100", "report.pdf"),
            ("no filename", "attachment", "filename"),
            ("empty quotes", 'attachment; filename=""', "filename"),
        ]
    )
    def test_filename(self, _name: str, value: str | None, expected: str) -> None:
        self.assertEqual(expected, filename_from_content_disposition(value))
