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
"""AuthoredModule — stamps authorship and timestamps onto API module documents.

API modules opt in with :meth:`AuthoredModule.register_module`. From then on
every document they create carries ``createdBy``, ``createdAt`` and
``updatedAt``, every update refreshes ``updatedAt``, and any change to a
document that belongs to a course also refreshes the ``updatedAt`` of that
course's ``config`` document.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog

from authored.config.properties import AuthoredProperties
from authored.context.request_context import RequestContext
from authored.kernel.exceptions import DuplicateRegistrationException, InvalidModuleClassException

if TYPE_CHECKING:
    from authored.api.module import ApiModule
    from authored.api.request import ApiRequest
    from authored.core.application import Application

logger = structlog.get_logger("authored.module")

AUTHORED_FIELDS = ("createdAt", "createdBy", "updatedAt")


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class RegistrationOptions:
    """Per-module registration settings.

    ``access_check=None`` falls back to the ``authored.access-check`` setting.
    """

    access_check: bool | None = None


class AuthoredModule:
    """Adds authoring metadata to the documents of registered API modules."""

    name = "authored"

    def __init__(self, app: Application, properties: AuthoredProperties | None = None) -> None:
        self.app = app
        self.properties = properties if properties is not None else app.config.bind(AuthoredProperties)
        self.schema_name = self.properties.schema_name
        self.registered_modules: list[Any] = []
        self._ready = False

    @property
    def is_ready(self) -> bool:
        return self._ready

    async def start(self) -> None:
        """Re-apply schema extensions whenever the schema registry reloads."""
        jsonschema = await self.app.wait_for_module(self.properties.schema_module)
        jsonschema.register_schemas_hook.tap(self.register_schemas)
        self._ready = True
        logger.info("authored_module_ready", schema=self.schema_name)

    async def stop(self) -> None:
        self._ready = False

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    async def register_module(self, mod: ApiModule, options: RegistrationOptions | None = None) -> None:
        """Register an API module for authoring metadata.

        Raises:
            DuplicateRegistrationException: ``mod`` is already registered.
            InvalidModuleClassException: ``mod`` is not an API module.
        """
        mod_name = getattr(mod, "name", type(mod).__name__)
        if any(registered is mod for registered in self.registered_modules):
            raise DuplicateRegistrationException(mod_name)
        if not getattr(mod, "is_api_module", False):
            raise InvalidModuleClassException(mod_name)

        if getattr(mod, "schema_name", None):
            await self._extend_schema(mod.schema_name)

        self.registered_modules.append(mod)

        mod.request_hook.tap(self.update_author)
        mod.pre_insert_hook.tap(self._on_insert)
        mod.pre_update_hook.tap(self._on_update)
        mod.pre_delete_hook.tap(self._on_delete)

        access_check = options.access_check if options is not None else None
        if access_check is None:
            access_check = self.properties.access_check
        if access_check:
            mod.access_check_hook.tap(lambda request, data: self.check_access(mod, request, data))

        logger.info("module_registered", module=mod_name, access_check=bool(access_check))

    async def register_schemas(self) -> None:
        """Extend the schema of every registered module that declares one."""
        for mod in self.registered_modules:
            schema_name = getattr(mod, "schema_name", None)
            if schema_name:
                await self._extend_schema(schema_name)

    async def _extend_schema(self, schema_name: str) -> None:
        # Schema extension is documentation only; failures never block registration.
        try:
            jsonschema = await self.app.wait_for_module(self.properties.schema_module)
            jsonschema.extend_schema(schema_name, self.schema_name)
        except Exception as exc:
            logger.warning(
                "schema_extension_failed",
                schema=schema_name,
                extension=self.schema_name,
                error=str(exc),
            )

    # ------------------------------------------------------------------
    # Hook handlers
    # ------------------------------------------------------------------

    async def update_author(self, request: ApiRequest) -> None:
        """Set ``createdBy`` on a creating request that has none."""
        if request.method != "POST" or not request.api_data.modifying:
            return
        data = request.api_data.data
        if data.get("createdBy"):
            return
        user_id = self._current_user_id(request)
        if user_id is not None:
            data["createdBy"] = str(user_id)
            logger.debug("created_by_stamped", user=data["createdBy"])

    async def update_timestamps(
        self,
        action: str,
        data: dict[str, Any],
        original: dict[str, Any] | None = None,
    ) -> None:
        """Stamp ``updatedAt`` (and ``createdAt`` on insert), then cascade to the course.

        ``original`` is the stored document for an update; it supplies the
        ``_courseId`` when the update payload does not carry one.
        """
        if action not in ("insert", "update"):
            raise ValueError(f"Unknown timestamp action '{action}'")
        now = utc_timestamp()
        data["updatedAt"] = now
        if action == "insert" and not data.get("createdAt"):
            data["createdAt"] = now
        await self.update_course_timestamp({**original, **data} if original else data)

    async def update_course_timestamp(self, data: dict[str, Any]) -> None:
        """Refresh ``updatedAt`` on the config document of ``data``'s course."""
        course_id = data.get("_courseId")
        if not course_id:
            return
        content, mongodb = await self.app.wait_for_module(
            self.properties.content_module, self.properties.persistence_module
        )
        results = await content.find({"_type": self.properties.config_type, "_courseId": course_id})
        config = results[0] if results else None
        if not config:
            return
        await mongodb.update(
            content.collection_name,
            {"_id": config["_id"]},
            {"$set": {"updatedAt": utc_timestamp()}},
        )
        logger.debug("course_timestamp_updated", course=str(course_id), config=str(config["_id"]))

    async def check_access(self, mod: ApiModule, request: ApiRequest, data: dict[str, Any]) -> bool:
        """Allow access only to the principal that created the document.

        Denies when no owner can be determined.
        """
        created_by = data.get("createdBy")
        if not created_by and "_id" in data:
            results = await mod.find({"_id": data["_id"]})
            if results and results[0]:
                created_by = results[0].get("createdBy")
        user_id = self._current_user_id(request)
        if not created_by or user_id is None:
            return False
        return str(created_by) == str(user_id)

    async def _on_insert(self, data: dict[str, Any]) -> None:
        await self.update_timestamps("insert", data)

    async def _on_update(self, original: dict[str, Any], update_data: dict[str, Any]) -> None:
        # createdAt is only ever stamped on insert; createdBy may be filled in once.
        if "createdAt" in update_data:
            update_data.pop("createdAt")
            logger.debug("immutable_field_dropped", field="createdAt")
        if "createdBy" in update_data and original.get("createdBy"):
            update_data.pop("createdBy")
            logger.debug("immutable_field_dropped", field="createdBy")
        await self.update_timestamps("update", update_data, original)

    async def _on_delete(self, original: dict[str, Any]) -> None:
        await self.update_course_timestamp(original)

    @staticmethod
    def _current_user_id(request: ApiRequest) -> str | None:
        auth = getattr(request, "auth", None)
        if auth is not None and auth.user_id is not None:
            return auth.user_id
        ctx = RequestContext.current()
        if ctx is not None and ctx.security_context is not None:
            return ctx.security_context.user_id
        return None
