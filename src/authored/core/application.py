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
"""Application — named module registry with asynchronous lookup.

Modules resolve their collaborators with :meth:`Application.wait_for_module`
instead of importing each other, so registration order does not matter:
a lookup issued before the target registers simply waits for it.
"""

from __future__ import annotations

import asyncio
import difflib
import time
from typing import Any

from authored.core.config import Config
from authored.kernel.exceptions import ConflictException, ModuleNotFoundException
from authored.kernel.lifecycle import Lifecycle
from authored.logging.port import LoggingPort
from authored.logging.structlog_adapter import StructlogAdapter


class Application:
    """Owns the host's modules and drives their lifecycle.

    Startup sequence:
    1. Configure logging (from the ``authored.logging`` section)
    2. Call ``start()`` on each registered :class:`Lifecycle` module, in
       registration order
    3. Log the startup time
    """

    def __init__(self, config: Config | None = None) -> None:
        self.config = config if config is not None else Config.defaults()
        self._logging: LoggingPort = StructlogAdapter()
        self._logging.configure(self.config)
        self._logger = self._logging.get_logger("authored.core")

        self._modules: dict[str, Any] = {}
        self._waiters: dict[str, asyncio.Future[Any]] = {}
        self._started: list[Any] = []
        self._startup_time: float = 0.0

    @property
    def module_names(self) -> list[str]:
        return list(self._modules)

    @property
    def startup_time_seconds(self) -> float:
        return self._startup_time

    def register_module(self, name: str, instance: Any) -> None:
        """Make ``instance`` available under ``name`` and wake any waiters."""
        if name in self._modules:
            raise ConflictException(
                f"Module '{name}' is already registered",
                code="DUPL_MODULE_NAME",
                context={"module": name},
            )
        self._modules[name] = instance
        waiter = self._waiters.pop(name, None)
        if waiter is not None and not waiter.done():
            waiter.set_result(instance)
        self._logger.debug("module_added", module=name)

    def get_module(self, name: str) -> Any:
        """Return a registered module without waiting."""
        try:
            return self._modules[name]
        except KeyError:
            suggestions = difflib.get_close_matches(name, list(self._modules), n=5, cutoff=0.4)
            raise ModuleNotFoundException(name, suggestions) from None

    async def wait_for_module(self, *names: str) -> Any:
        """Resolve one or more modules, waiting for any not yet registered.

        Returns the module itself for a single name, or a list in argument
        order for several names.
        """
        if not names:
            raise ValueError("wait_for_module() requires at least one module name")
        resolved = await asyncio.gather(*(self._wait_for(name) for name in names))
        return resolved[0] if len(names) == 1 else list(resolved)

    async def _wait_for(self, name: str) -> Any:
        if name in self._modules:
            return self._modules[name]
        waiter = self._waiters.get(name)
        if waiter is None:
            waiter = asyncio.get_running_loop().create_future()
            self._waiters[name] = waiter
        return await waiter

    async def start(self) -> None:
        start = time.perf_counter()
        self._logger.info("application_starting", modules=len(self._modules))

        for name, instance in list(self._modules.items()):
            if isinstance(instance, Lifecycle):
                await instance.start()
                self._started.append(instance)
                self._logger.debug("module_started", module=name)

        self._startup_time = time.perf_counter() - start
        self._logger.info(
            "application_started",
            seconds=round(self._startup_time, 3),
            started=len(self._started),
        )

    async def stop(self) -> None:
        """Stop started modules in reverse order; failures are logged."""
        for instance in reversed(self._started):
            try:
                await instance.stop()
            except Exception as exc:
                self._logger.warning(
                    "module_stop_failed",
                    module=type(instance).__name__,
                    error=str(exc),
                )
        self._started.clear()
        self._logger.info("application_stopped")
