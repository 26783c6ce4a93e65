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
"""StructlogAdapter — LoggingPort implementation using structlog."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import Any

import structlog

from authored.core.config import Config

# request_id arrives through merge_contextvars while a RequestContext is open.
_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
]

_RENDERERS: dict[str, Callable[[], list[structlog.types.Processor]]] = {
    "console": lambda: [structlog.dev.ConsoleRenderer()],
    "plain": lambda: [structlog.dev.ConsoleRenderer(colors=False)],
    "json": lambda: [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()],
}


def _stdlib_level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


class StructlogAdapter:
    """Routes structlog events through stdlib logging to stdout.

    Settings under ``authored.logging``:

    - ``level.root`` sets the root level; any other ``level.<logger>`` key
      sets that logger's level.
    - ``format`` picks the renderer: ``console`` (coloured), ``plain``
      (console without colours, for CI logs) or ``json``.
    """

    def __init__(self) -> None:
        self._root_level: str = "INFO"
        self._format: str = "console"
        self._module_levels: dict[str, str] = {}

    @property
    def formats(self) -> list[str]:
        return sorted(_RENDERERS)

    def configure(self, config: Config) -> None:
        fmt = str(config.get("authored.logging.format", "console")).lower()
        if fmt not in _RENDERERS:
            raise ValueError(f"Unknown log format '{fmt}'; expected one of {self.formats}")

        levels = {name: str(level).upper() for name, level in config.get_section("authored.logging.level").items()}
        self._root_level = levels.pop("root", "INFO")
        self._module_levels = levels
        self._format = fmt

        logging.basicConfig(format="%(message)s", stream=sys.stdout, level=_stdlib_level(self._root_level), force=True)
        structlog.configure(
            processors=[*_SHARED_PROCESSORS, *_RENDERERS[fmt]()],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        for name, level in levels.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(_stdlib_level(level))
