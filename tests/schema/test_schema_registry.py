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
"""Tests for SchemaRegistry extension merging."""

import json
from pathlib import Path

import pytest

from authored.kernel.exceptions import SchemaNotFoundException
from authored.schema.registry import SchemaRegistry

PAGE_SCHEMA = {
    "$anchor": "page",
    "type": "object",
    "properties": {"title": {"type": "string"}},
    "required": ["title"],
}


@pytest.fixture
async def registry():
    registry = SchemaRegistry()
    await registry.start()
    registry.register_schema("page", PAGE_SCHEMA)
    return registry


class TestSchemaRegistry:
    async def test_builtin_authored_schema_loaded(self, registry):
        schema = registry.get_schema("authored")
        assert set(schema["properties"]) == {"createdAt", "createdBy", "updatedAt"}
        assert schema["required"] == ["createdAt", "createdBy", "updatedAt"]
        assert schema["properties"]["createdAt"]["format"] == "date-time"

    async def test_extend_schema_merges_properties_and_required(self, registry):
        registry.extend_schema("page", "authored")
        schema = registry.get_schema("page")
        assert set(schema["properties"]) == {"title", "createdAt", "createdBy", "updatedAt"}
        assert schema["required"] == ["title", "createdAt", "createdBy", "updatedAt"]

    async def test_extension_does_not_mutate_stored_schema(self, registry):
        registry.extend_schema("page", "authored")
        registry.get_schema("page")
        assert PAGE_SCHEMA["required"] == ["title"]

    async def test_extend_is_idempotent(self, registry):
        registry.extend_schema("page", "authored")
        registry.extend_schema("page", "authored")
        assert registry.extensions_of("page") == ["authored"]

    async def test_extend_unknown_base_raises(self, registry):
        with pytest.raises(SchemaNotFoundException):
            registry.extend_schema("missing", "authored")

    async def test_extend_unknown_extension_raises(self, registry):
        with pytest.raises(SchemaNotFoundException):
            registry.extend_schema("page", "missing")

    async def test_get_unknown_schema_raises(self, registry):
        with pytest.raises(SchemaNotFoundException):
            registry.get_schema("missing")

    async def test_load_schema_file_uses_file_name_without_anchor(self, registry, tmp_path: Path):
        path = tmp_path / "article.schema.json"
        path.write_text(json.dumps({"type": "object", "properties": {}}))
        assert registry.load_schema_file(path) == "article"
        assert "article" in registry.schema_names

    async def test_register_schemas_resets_and_fires_hook(self, registry):
        registry.extend_schema("page", "authored")
        calls: list[str] = []

        async def reapply():
            calls.append("reapply")
            registry.extend_schema("page", "authored")

        registry.register_schemas_hook.tap(reapply)
        await registry.register_schemas()

        assert calls == ["reapply"]
        assert registry.extensions_of("page") == ["authored"]

    async def test_register_schemas_clears_extensions(self, registry):
        registry.extend_schema("page", "authored")
        await registry.register_schemas()
        assert registry.extensions_of("page") == []
