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
"""Request-scoped principal lookup.

The host opens a RequestContext around each request it handles. Hook
handlers that receive no explicit principal read it from here, and every
log event emitted while the context is open carries its ``request_id``.
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar

import structlog

from authored.security.context import SecurityContext

_request_context_var: ContextVar[RequestContext | None] = ContextVar(
    "authored_request_context", default=None
)


class RequestContext:
    __slots__ = ("request_id", "security_context")

    def __init__(self, security_context: SecurityContext | None = None, request_id: str | None = None) -> None:
        self.request_id = request_id or uuid.uuid4().hex
        self.security_context = security_context

    @classmethod
    def init(
        cls,
        security_context: SecurityContext | None = None,
        request_id: str | None = None,
    ) -> RequestContext:
        """Open a context for the current task and bind its ID for logging."""
        ctx = cls(security_context, request_id)
        _request_context_var.set(ctx)
        structlog.contextvars.bind_contextvars(request_id=ctx.request_id)
        return ctx

    @classmethod
    def current(cls) -> RequestContext | None:
        return _request_context_var.get()

    @classmethod
    def clear(cls) -> None:
        _request_context_var.set(None)
        structlog.contextvars.unbind_contextvars("request_id")
