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
"""Authored — authorship and timestamp metadata for API module documents.

Register an API module with :class:`AuthoredModule` and its documents gain
``createdBy``, ``createdAt`` and ``updatedAt`` fields, kept current by the
module's lifecycle hooks.
"""

from authored.api import AbstractApiModule, ApiData, ApiModule, ApiRequest
from authored.config import AuthoredProperties, MongoDBProperties
from authored.context import RequestContext
from authored.core import Application, Config, config_properties
from authored.data import MongoDBStore
from authored.hooks import Hook
from authored.kernel import (
    AuthoredException,
    DuplicateRegistrationException,
    InvalidModuleClassException,
)
from authored.module import AUTHORED_FIELDS, AuthoredModule, RegistrationOptions, utc_timestamp
from authored.schema import SchemaRegistry
from authored.security import SecurityContext

__version__ = "1.0.0"

__all__ = [
    "AUTHORED_FIELDS",
    "AbstractApiModule",
    "ApiData",
    "ApiModule",
    "ApiRequest",
    "Application",
    "AuthoredException",
    "AuthoredModule",
    "AuthoredProperties",
    "Config",
    "DuplicateRegistrationException",
    "Hook",
    "InvalidModuleClassException",
    "MongoDBProperties",
    "MongoDBStore",
    "RegistrationOptions",
    "RequestContext",
    "SchemaRegistry",
    "SecurityContext",
    "config_properties",
    "utc_timestamp",
]
