# Copyright 2025 CrownOps Engineering
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

"""Shared configuration constants for harvx."""

from __future__ import annotations

from typing import Final

DEFAULT_PROFILE_NAME: Final[str] = "default"
PROFILE_TABLE_KEY: Final[str] = "profile"
REPO_CONFIG_FILENAME: Final[str] = "harvx.toml"
GLOBAL_CONFIG_DIRNAME: Final[str] = "harvx"
GLOBAL_CONFIG_FILENAME: Final[str] = "config.toml"
VCS_BOUNDARY_DIRNAME: Final[str] = ".git"

MAX_INHERITANCE_DEPTH: Final[int] = 3
MAX_REPO_SEARCH_DEPTH: Final[int] = 20

__all__ = [
    "DEFAULT_PROFILE_NAME",
    "GLOBAL_CONFIG_DIRNAME",
    "GLOBAL_CONFIG_FILENAME",
    "MAX_INHERITANCE_DEPTH",
    "MAX_REPO_SEARCH_DEPTH",
    "PROFILE_TABLE_KEY",
    "REPO_CONFIG_FILENAME",
    "VCS_BOUNDARY_DIRNAME",
]
