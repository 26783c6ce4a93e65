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
"""Lifecycle protocol for modules owned by the Application."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Lifecycle(Protocol):
    """Start/stop contract for registered modules.

    The Application calls start() on every module that implements it, in
    registration order, and stop() in reverse order on shutdown.
    """

    async def start(self) -> None:
        """Resolve collaborators and subscribe to hooks.

        Raising here aborts application startup.
        """
        ...

    async def stop(self) -> None:
        """Release connections. Exceptions are logged, not re-raised."""
        ...
