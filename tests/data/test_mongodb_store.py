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
"""Tests for MongoDBStore — integration tests using mongomock."""

from __future__ import annotations

import pytest

mongomock_motor = pytest.importorskip("mongomock_motor", reason="mongomock-motor not installed")

from mongomock_motor import AsyncMongoMockClient

from authored.config.properties import MongoDBProperties
from authored.data.mongodb import MongoDBStore


@pytest.fixture
def store():
    return MongoDBStore(AsyncMongoMockClient(), "test_db")


class TestMongoDBStore:
    async def test_insert_sets_id(self, store):
        doc = await store.insert("content", {"_type": "page", "title": "Intro"})
        assert "_id" in doc
        found = await store.find("content", {"_id": doc["_id"]})
        assert found[0]["title"] == "Intro"

    async def test_find_filters_by_query(self, store):
        await store.insert("content", {"_type": "config", "_courseId": "c1"})
        await store.insert("content", {"_type": "page", "_courseId": "c1"})
        await store.insert("content", {"_type": "config", "_courseId": "c2"})

        results = await store.find("content", {"_type": "config", "_courseId": "c1"})
        assert len(results) == 1
        assert results[0]["_courseId"] == "c1"

    async def test_find_without_query_returns_all(self, store):
        await store.insert("content", {"n": 1})
        await store.insert("content", {"n": 2})
        assert len(await store.find("content")) == 2

    async def test_update_with_operator(self, store):
        doc = await store.insert("content", {"title": "Old", "updatedAt": "a"})
        updated = await store.update("content", {"_id": doc["_id"]}, {"$set": {"updatedAt": "b"}})
        assert updated["updatedAt"] == "b"
        assert updated["title"] == "Old"

    async def test_update_plain_patch_is_set(self, store):
        doc = await store.insert("content", {"title": "Old"})
        updated = await store.update("content", {"_id": doc["_id"]}, {"title": "New"})
        assert updated["title"] == "New"

    async def test_update_no_match_returns_none(self, store):
        assert await store.update("content", {"_id": "missing"}, {"title": "x"}) is None

    async def test_delete(self, store):
        doc = await store.insert("content", {"title": "Gone"})
        assert await store.delete("content", {"_id": doc["_id"]}) == 1
        assert await store.find("content", {}) == []

    async def test_from_properties(self):
        store = MongoDBStore.from_properties(MongoDBProperties(database="courses"))
        try:
            assert store.database.name == "courses"
        finally:
            await store.stop()
