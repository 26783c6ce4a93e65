# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Lifecycle hooks — ordered callback registries fired at a pipeline stage.

A module owns its hooks; other modules subscribe with :meth:`Hook.tap` and
keep the returned handler as their subscription handle.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

HookHandler = Callable[..., Any]


class Hook:
    """Callback registry for a single lifecycle event.

    Handlers run in subscription order. Coroutine handlers are awaited
    before the next handler starts, so handlers may mutate the payload
    they receive and later handlers see the change.
    """

    def __init__(self, name: str = "hook") -> None:
        self._name = name
        self._handlers: list[HookHandler] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def has_observers(self) -> bool:
        return bool(self._handlers)

    def tap(self, handler: HookHandler) -> HookHandler:
        """Subscribe a handler and return it as the subscription handle."""
        self._handlers.append(handler)
        logger.debug("Tapped hook '%s' (%d handlers)", self._name, len(self._handlers))
        return handler

    def untap(self, handler: HookHandler) -> None:
        """Remove a previously tapped handler. Unknown handlers are ignored."""
        if handler in self._handlers:
            self._handlers.remove(handler)

    async def invoke(self, *args: Any) -> list[Any]:
        """Call every handler with ``args`` and return their results in order."""
        results: list[Any] = []
        for handler in list(self._handlers):
            result = handler(*args)
            if inspect.isawaitable(result):
                result = await result
            results.append(result)
        return results

    def __len__(self) -> int:
        return len(self._handlers)

    def __repr__(self) -> str:
        return f"Hook(name={self._name!r}, handlers={len(self._handlers)})"
