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
"""End-to-end tests: authored plugin wired into an application over mongomock."""

from __future__ import annotations

import asyncio

import pytest

mongomock_motor = pytest.importorskip("mongomock_motor", reason="mongomock-motor not installed")

from mongomock_motor import AsyncMongoMockClient

from authored.api.module import AbstractApiModule
from authored.api.request import ApiRequest
from authored.core.application import Application
from authored.core.config import Config
from authored.data.mongodb import MongoDBStore
from authored.kernel.exceptions import ForbiddenException, ValidationException
from authored.module import AuthoredModule, RegistrationOptions
from authored.schema.registry import SchemaRegistry

# ---------------------------------------------------------------------------
# Sibling modules
# ---------------------------------------------------------------------------


class ContentModule(AbstractApiModule):
    name = "content"
    collection_name = "content"
    schema_name = "content"


class PagesModule(AbstractApiModule):
    name = "pages"
    collection_name = "content"
    schema_name = "page"
    document_type = "page"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
async def context():
    app = Application(Config.defaults())
    schemas = SchemaRegistry()
    store = MongoDBStore(AsyncMongoMockClient(), "test_db")
    content = ContentModule(app)
    pages = PagesModule(app)
    authored = AuthoredModule(app)

    app.register_module("jsonschema", schemas)
    app.register_module("mongodb", store)
    app.register_module("content", content)
    app.register_module("pages", pages)
    app.register_module("authored", authored)
    await app.start()

    schemas.register_schema("page", {"type": "object", "properties": {"title": {"type": "string"}}})
    schemas.register_schema("content", {"type": "object", "properties": {}})

    yield {"app": app, "schemas": schemas, "store": store, "content": content, "pages": pages, "authored": authored}
    await app.stop()


async def stored(store: MongoDBStore, doc_id) -> dict:
    return (await store.find("content", {"_id": doc_id}))[0]


# ===========================================================================
# Scenario
# ===========================================================================


class TestAuthoringScenario:
    async def test_register_extends_page_schema(self, context):
        await context["authored"].register_module(context["pages"])
        schema = context["schemas"].get_schema("page")
        assert {"createdAt", "createdBy", "updatedAt"} <= set(schema["properties"])
        assert "createdBy" in schema["required"]

    async def test_create_and_update_page(self, context):
        authored, pages, content, store = context["authored"], context["pages"], context["content"], context["store"]
        await authored.register_module(content)
        await authored.register_module(pages)

        config = await content.handle_request(
            ApiRequest.create("POST", data={"_type": "config", "_courseId": "C"}, user_id="U1")
        )
        page = await pages.handle_request(
            ApiRequest.create("POST", data={"_type": "page", "_courseId": "C", "title": "Intro"}, user_id="U1")
        )

        created = await stored(store, page["_id"])
        assert created["createdBy"] == "U1"
        assert created["createdAt"] == created["updatedAt"]
        config_before = (await stored(store, config["_id"]))["updatedAt"]

        await asyncio.sleep(0.01)
        await pages.handle_request(
            ApiRequest.create("PATCH", query={"_id": page["_id"]}, data={"title": "Welcome"}, user_id="U2")
        )

        updated = await stored(store, page["_id"])
        assert updated["title"] == "Welcome"
        assert updated["updatedAt"] > created["updatedAt"]
        assert updated["createdBy"] == "U1"
        assert updated["createdAt"] == created["createdAt"]
        assert (await stored(store, config["_id"]))["updatedAt"] > config_before

    async def test_cascade_touches_only_own_course_config(self, context):
        authored, pages, store = context["authored"], context["pages"], context["store"]
        await authored.register_module(pages)
        own = await store.insert("content", {"_type": "config", "_courseId": "C", "updatedAt": "old"})
        other = await store.insert("content", {"_type": "config", "_courseId": "D", "updatedAt": "old"})

        await pages.insert({"_type": "page", "_courseId": "C"})

        assert (await stored(store, own["_id"]))["updatedAt"] != "old"
        assert (await stored(store, other["_id"]))["updatedAt"] == "old"

    async def test_no_course_config_writes_only_the_page(self, context):
        authored, pages, store = context["authored"], context["pages"], context["store"]
        await authored.register_module(pages)

        await pages.insert({"_type": "page", "_courseId": "lonely"})

        docs = await store.find("content", {})
        assert len(docs) == 1
        assert docs[0]["_type"] == "page"

    async def test_client_cannot_rewrite_author(self, context):
        authored, pages, store = context["authored"], context["pages"], context["store"]
        await authored.register_module(pages)
        page = await pages.handle_request(ApiRequest.create("POST", data={"title": "A"}, user_id="U1"))

        await pages.handle_request(
            ApiRequest.create("PUT", query={"_id": page["_id"]}, data={"createdBy": "U2"}, user_id="U1")
        )

        assert (await stored(store, page["_id"]))["createdBy"] == "U1"

    async def test_client_cannot_backdate_or_postdate_creation(self, context):
        authored, pages, store = context["authored"], context["pages"], context["store"]
        await authored.register_module(pages)
        legacy = await store.insert("content", {"_type": "page", "title": "Old"})

        await pages.handle_request(
            ApiRequest.create("PATCH", query={"_id": legacy["_id"]}, data={"createdAt": "2999-01-01T00:00:00.000Z"})
        )

        updated = await stored(store, legacy["_id"])
        assert "createdAt" not in updated
        assert updated["updatedAt"] < "2999-01-01T00:00:00.000Z"

    async def test_patch_without_query_touches_nothing(self, context):
        authored, pages, content, store = context["authored"], context["pages"], context["content"], context["store"]
        await authored.register_module(pages)
        await content.handle_request(ApiRequest.create("POST", data={"_type": "config", "_courseId": "C"}))
        await pages.handle_request(ApiRequest.create("POST", data={"title": "A"}))
        await pages.handle_request(ApiRequest.create("POST", data={"title": "B"}))

        with pytest.raises(ValidationException):
            await pages.handle_request(ApiRequest.create("PATCH", data={"title": "HIJACK"}))

        docs = await store.find("content", {})
        assert sorted(doc.get("title", "") for doc in docs) == ["", "A", "B"]

    async def test_pages_cannot_reach_course_config(self, context):
        authored, pages, content, store = context["authored"], context["pages"], context["content"], context["store"]
        await authored.register_module(pages)
        config = await content.handle_request(ApiRequest.create("POST", data={"_type": "config", "_courseId": "C"}))

        assert await pages.find({"_id": config["_id"]}) == []
        assert (await stored(store, config["_id"]))["_type"] == "config"

    async def test_schema_reload_keeps_extension(self, context):
        await context["authored"].register_module(context["pages"])
        await context["schemas"].register_schemas()
        assert context["schemas"].extensions_of("page") == ["authored"]

    async def test_missing_schema_does_not_block_registration(self, context):
        class QuizModule(AbstractApiModule):
            name = "quizzes"
            collection_name = "quizzes"
            schema_name = "quiz"

        quizzes = QuizModule(context["app"])
        await context["authored"].register_module(quizzes)
        assert quizzes in context["authored"].registered_modules


class TestAccessControlledModule:
    async def test_only_creator_may_update(self, context):
        authored, pages = context["authored"], context["pages"]
        await authored.register_module(pages, RegistrationOptions(access_check=True))
        page = await pages.handle_request(ApiRequest.create("POST", data={"title": "A"}, user_id="U1"))

        with pytest.raises(ForbiddenException):
            await pages.handle_request(
                ApiRequest.create("PATCH", query={"_id": page["_id"]}, data={"title": "B"}, user_id="U2")
            )

        updated = await pages.handle_request(
            ApiRequest.create("PATCH", query={"_id": page["_id"]}, data={"title": "B"}, user_id="U1")
        )
        assert updated["title"] == "B"

    async def test_listing_hides_other_users_documents(self, context):
        authored, pages = context["authored"], context["pages"]
        await authored.register_module(pages, RegistrationOptions(access_check=True))
        await pages.handle_request(ApiRequest.create("POST", data={"title": "mine"}, user_id="U1"))
        await pages.handle_request(ApiRequest.create("POST", data={"title": "theirs"}, user_id="U2"))

        results = await pages.handle_request(ApiRequest.create("GET", user_id="U1"))

        assert [doc["title"] for doc in results] == ["mine"]
