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
"""Request types passed through an API module's request hook."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from authored.security.context import SecurityContext

MODIFYING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


@dataclass
class ApiData:
    """Parsed API payload: the target query and the document body."""

    query: dict[str, Any] = field(default_factory=dict)
    data: dict[str, Any] = field(default_factory=dict)
    modifying: bool = False


@dataclass
class ApiRequest:
    """A request addressed to an API module.

    ``api_data.modifying`` defaults from the HTTP method, so a POST is a
    modifying request unless the caller says otherwise.
    """

    method: str
    api_data: ApiData = field(default_factory=ApiData)
    auth: SecurityContext | None = None

    def __post_init__(self) -> None:
        self.method = self.method.upper()

    @classmethod
    def create(
        cls,
        method: str,
        *,
        data: dict[str, Any] | None = None,
        query: dict[str, Any] | None = None,
        user_id: str | None = None,
    ) -> ApiRequest:
        method = method.upper()
        return cls(
            method=method,
            api_data=ApiData(
                query={} if query is None else query,
                data={} if data is None else data,
                modifying=method in MODIFYING_METHODS,
            ),
            auth=SecurityContext(user_id=user_id) if user_id is not None else None,
        )
