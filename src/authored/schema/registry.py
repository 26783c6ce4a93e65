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
"""In-process JSON schema registry with schema extensions.

An extension schema is merged into a base schema when the base is read:
its ``properties`` are added and its ``required`` names are appended.
Validation is left to the host; this registry only stores and merges.
"""

from __future__ import annotations

import copy
import importlib.resources
import json
import logging
from pathlib import Path
from typing import Any

from authored.hooks.hook import Hook
from authored.kernel.exceptions import SchemaNotFoundException

logger = logging.getLogger(__name__)

BUILTIN_SCHEMAS = ("authored.schema.json",)


class SchemaRegistry:
    """Named JSON schemas plus the extensions applied to each."""

    def __init__(self) -> None:
        self._schemas: dict[str, dict[str, Any]] = {}
        self._extensions: dict[str, list[str]] = {}
        self.register_schemas_hook = Hook("register_schemas")

    @property
    def schema_names(self) -> list[str]:
        return list(self._schemas)

    async def start(self) -> None:
        self._register_builtin_schemas()

    async def stop(self) -> None:
        pass

    def register_schema(self, name: str, schema: dict[str, Any]) -> None:
        """Store ``schema`` under ``name``, replacing any previous definition."""
        self._schemas[name] = schema
        logger.debug("Registered schema '%s'", name)

    def load_schema_file(self, path: str | Path) -> str:
        """Register a ``*.schema.json`` file; returns the name it was stored under.

        The name is the schema's ``$anchor`` when present, else the file
        name without the ``.schema.json`` suffix.
        """
        path = Path(path)
        with open(path) as f:
            schema = json.load(f)
        name = schema.get("$anchor") or path.name.removesuffix(".schema.json")
        self.register_schema(name, schema)
        return name

    def extend_schema(self, base_name: str, extension_name: str) -> None:
        """Merge ``extension_name`` into ``base_name`` on every subsequent read."""
        if base_name not in self._schemas:
            raise SchemaNotFoundException(base_name)
        if extension_name not in self._schemas:
            raise SchemaNotFoundException(extension_name)
        extensions = self._extensions.setdefault(base_name, [])
        if extension_name not in extensions:
            extensions.append(extension_name)
            logger.debug("Extended schema '%s' with '%s'", base_name, extension_name)

    def extensions_of(self, base_name: str) -> list[str]:
        return list(self._extensions.get(base_name, []))

    def get_schema(self, name: str) -> dict[str, Any]:
        """Return a copy of the schema with all of its extensions merged in."""
        if name not in self._schemas:
            raise SchemaNotFoundException(name)
        merged = copy.deepcopy(self._schemas[name])
        for extension_name in self._extensions.get(name, []):
            extension = self._schemas[extension_name]
            merged.setdefault("properties", {}).update(copy.deepcopy(extension.get("properties", {})))
            required = merged.setdefault("required", [])
            for field in extension.get("required", []):
                if field not in required:
                    required.append(field)
        return merged

    async def register_schemas(self) -> None:
        """Drop all extensions, reload built-in schemas and fire the hook.

        Subscribers of ``register_schemas_hook`` re-apply their extensions.
        """
        self._extensions.clear()
        self._register_builtin_schemas()
        await self.register_schemas_hook.invoke()

    def _register_builtin_schemas(self) -> None:
        resources = importlib.resources.files("authored.resources")
        for filename in BUILTIN_SCHEMAS:
            with importlib.resources.as_file(resources.joinpath(filename)) as p:
                self.load_schema_file(p)
