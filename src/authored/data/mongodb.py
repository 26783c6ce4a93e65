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
"""MongoDB persistence collaborator built on Motor.

Operates on plain dict documents addressed by collection name. There is
no document mapping layer: hooks mutate the raw dicts before they are
written.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pymongo import ReturnDocument

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

    from authored.config.properties import MongoDBProperties

logger = logging.getLogger(__name__)


class MongoDBStore:
    """Collection-level CRUD over a Motor database.

    Usage::

        store = MongoDBStore.from_properties(config.bind(MongoDBProperties))
        await store.insert("content", {"_type": "page"})
        await store.update("content", {"_id": oid}, {"$set": {"title": "New"}})
    """

    def __init__(self, client: AsyncIOMotorClient, database: str) -> None:
        self._client = client
        self._database_name = database

    @classmethod
    def from_properties(cls, properties: MongoDBProperties) -> MongoDBStore:
        from motor.motor_asyncio import AsyncIOMotorClient

        client = AsyncIOMotorClient(
            properties.uri,
            minPoolSize=properties.min_pool_size,
            maxPoolSize=properties.max_pool_size,
        )
        return cls(client, properties.database)

    @property
    def database(self) -> AsyncIOMotorDatabase:
        return self._client[self._database_name]

    async def start(self) -> None:
        logger.info("Using MongoDB database '%s'", self._database_name)

    async def stop(self) -> None:
        self._client.close()

    async def find(self, collection: str, query: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Return every document in ``collection`` matching ``query``."""
        cursor = self.database[collection].find(query or {})
        return await cursor.to_list(None)

    async def insert(self, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        """Insert ``data``; the generated ``_id`` is written back into it."""
        result = await self.database[collection].insert_one(data)
        data["_id"] = result.inserted_id
        return data

    async def update(
        self,
        collection: str,
        filter: dict[str, Any],
        patch: dict[str, Any],
    ) -> dict[str, Any] | None:
        """Apply ``patch`` to the first match and return the updated document.

        A patch without update operators is treated as a ``$set``.
        """
        if not any(key.startswith("$") for key in patch):
            patch = {"$set": patch}
        return await self.database[collection].find_one_and_update(
            filter, patch, return_document=ReturnDocument.AFTER
        )

    async def delete(self, collection: str, filter: dict[str, Any]) -> int:
        """Delete the first match; returns the number of documents removed."""
        result = await self.database[collection].delete_one(filter)
        return result.deleted_count
