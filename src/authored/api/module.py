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
"""API module contract and a MongoDB-backed base implementation.

An API module exposes one collection of documents and fires hooks at each
stage of a request:

- ``request_hook(request)`` before the request is dispatched
- ``pre_insert_hook(data)`` before a new document is written
- ``pre_update_hook(original, update_data)`` before a patch is applied
- ``pre_delete_hook(original)`` before a document is removed
- ``access_check_hook(request, document)`` to decide whether the caller
  may touch an existing document; any ``False`` result denies access
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import structlog

from authored.hooks.hook import Hook
from authored.kernel.exceptions import ForbiddenException, ResourceNotFoundException, ValidationException

if TYPE_CHECKING:
    from authored.api.request import ApiRequest
    from authored.core.application import Application
    from authored.data.mongodb import MongoDBStore

logger = structlog.get_logger("authored.api")


@runtime_checkable
class ApiModule(Protocol):
    """What a sibling module must expose to register with the authored plugin."""

    name: str
    is_api_module: bool
    schema_name: str | None
    collection_name: str
    request_hook: Hook
    pre_insert_hook: Hook
    pre_update_hook: Hook
    pre_delete_hook: Hook
    access_check_hook: Hook

    async def find(self, query: dict[str, Any]) -> list[dict[str, Any]]: ...


class AbstractApiModule:
    """Base API module storing its documents in one MongoDB collection.

    Subclasses set ``name``, ``collection_name`` and optionally
    ``schema_name``; the store is resolved from the application on start.
    Modules sharing a collection set ``document_type`` so that their
    queries only see documents whose ``_type`` matches.
    """

    is_api_module = True
    name: str = "api"
    collection_name: str = "api"
    schema_name: str | None = None
    document_type: str | None = None

    def __init__(self, app: Application, persistence_module: str = "mongodb") -> None:
        self.app = app
        self._persistence_module = persistence_module
        self._store: MongoDBStore | None = None

        self.request_hook = Hook(f"{self.name}.request")
        self.pre_insert_hook = Hook(f"{self.name}.pre_insert")
        self.pre_update_hook = Hook(f"{self.name}.pre_update")
        self.pre_delete_hook = Hook(f"{self.name}.pre_delete")
        self.access_check_hook = Hook(f"{self.name}.access_check")

    @property
    def store(self) -> MongoDBStore:
        if self._store is None:
            raise RuntimeError(f"API module '{self.name}' has not been started")
        return self._store

    async def start(self) -> None:
        self._store = await self.app.wait_for_module(self._persistence_module)

    async def stop(self) -> None:
        pass

    async def find(self, query: dict[str, Any]) -> list[dict[str, Any]]:
        if self.document_type is not None:
            query = {**query, "_type": self.document_type}
        return await self.store.find(self.collection_name, query)

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any]:
        results = await self.find(query)
        if not results:
            raise ResourceNotFoundException(
                f"No {self.name} document matches {query}",
                code="NOT_FOUND",
                context={"module": self.name, "query": query},
            )
        return results[0]

    async def insert(self, data: dict[str, Any]) -> dict[str, Any]:
        if self.document_type is not None:
            data["_type"] = self.document_type
        await self.pre_insert_hook.invoke(data)
        return await self.store.insert(self.collection_name, data)

    async def update(self, query: dict[str, Any], data: dict[str, Any]) -> dict[str, Any] | None:
        original = await self.find_one(query)
        await self.pre_update_hook.invoke(original, data)
        return await self.store.update(self.collection_name, {"_id": original["_id"]}, {"$set": data})

    async def delete(self, query: dict[str, Any]) -> dict[str, Any]:
        original = await self.find_one(query)
        await self.pre_delete_hook.invoke(original)
        await self.store.delete(self.collection_name, {"_id": original["_id"]})
        return original

    async def has_access(self, request: ApiRequest, document: dict[str, Any]) -> bool:
        """True unless an access-check subscriber returns ``False``."""
        if not self.access_check_hook.has_observers:
            return True
        results = await self.access_check_hook.invoke(request, document)
        return all(results)

    async def handle_request(self, request: ApiRequest) -> Any:
        """Run the request hook, then dispatch on the HTTP method."""
        await self.request_hook.invoke(request)
        api_data = request.api_data

        if request.method == "GET":
            results = await self.find(api_data.query)
            return [doc for doc in results if await self.has_access(request, doc)]

        if request.method == "POST":
            return await self.insert(api_data.data)

        if request.method not in ("PUT", "PATCH", "DELETE"):
            raise ValueError(f"Unsupported method '{request.method}'")
        if not api_data.query:
            raise ValidationException(
                f"{request.method} on {self.name} requires a query",
                code="MISSING_QUERY",
                context={"module": self.name, "method": request.method},
            )

        original = await self.find_one(api_data.query)
        if not await self.has_access(request, original):
            logger.warning("access_denied", module=self.name, method=request.method, document=str(original["_id"]))
            raise ForbiddenException(
                f"Access to {self.name} document denied",
                code="FORBIDDEN",
                context={"module": self.name, "_id": str(original["_id"])},
            )

        if request.method == "DELETE":
            return await self.delete({"_id": original["_id"]})
        return await self.update({"_id": original["_id"]}, api_data.data)
