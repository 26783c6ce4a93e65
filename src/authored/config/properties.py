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
"""Typed configuration properties for the authored plugin."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from authored.core.config import config_properties


@config_properties(prefix="authored")
class AuthoredProperties(BaseModel):
    """Plugin settings (authored.*)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    schema_name: str = Field(default="authored", alias="schema-name")
    config_type: str = Field(default="config", alias="config-type")
    content_module: str = Field(default="content", alias="content-module")
    persistence_module: str = Field(default="mongodb", alias="persistence-module")
    schema_module: str = Field(default="jsonschema", alias="schema-module")
    access_check: bool = Field(default=False, alias="access-check")


@config_properties(prefix="authored.mongodb")
@dataclass
class MongoDBProperties:
    """Connection settings for the MongoDB store (authored.mongodb.*)."""

    uri: str = "mongodb://localhost:27017"
    database: str = "adapt-authoring"
    min_pool_size: int = 0
    max_pool_size: int = 100
