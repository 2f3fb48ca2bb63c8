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

import inspect
from collections.abc import Awaitable, Callable
from typing import Any, TypeAlias, TypeVar

__all__ = [
    "Callback",
    "notify",
]

T = TypeVar("T")

Callback: TypeAlias = Callable[[Exception | None, Any], Awaitable[None] | None]
"""A function that is called with `(error, result)` when an operation completes.

On success `error` is None. On failure `result` is None.
"""


async def _invoke(callback: Callback, error: Exception | None, result: Any) -> None:
    outcome = callback(error, result)
    if inspect.isawaitable(outcome):
        await outcome


async def notify(callback: Callback | None, awaitable: Awaitable[T]) -> T:
    """Await an operation and report its outcome to an optional callback.

    The outcome is always returned or raised, whether a callback is provided or not. The callback receives the same
    exception object that is raised.

    :param callback: An optional function, or coroutine function, that accepts `(error, result)`.
    :param awaitable: The operation to await.

    :return: The result of the operation.
    """
    try:
        result = await awaitable
    except Exception as error:
        if callback is not None:
            await _invoke(callback, error, None)
        raise

    if callback is not None:
        await _invoke(callback, None, result)
    return result
