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

"""harvx - configuration resolution for LLM context harvesting.

Resolves the active harvx profile from built-in defaults, user and repository
TOML files, environment variables and CLI flags, recording which layer
supplied every setting.
"""

from __future__ import annotations

from harvx.exceptions import HarvxError, HarvxTypeError, HarvxValidationError

from .config import (
    FieldKey,
    Profile,
    ProfileResolution,
    ResolvedConfig,
    ResolveOptions,
    load_profiles,
    resolve_config,
    resolve_profile,
)
from .core.model_types import ConfigSource

__all__ = [
    "ConfigSource",
    "FieldKey",
    "HarvxError",
    "HarvxTypeError",
    "HarvxValidationError",
    "Profile",
    "ProfileResolution",
    "ResolveOptions",
    "ResolvedConfig",
    "__version__",
    "load_profiles",
    "resolve_config",
    "resolve_profile",
]

__version__ = "0.1.0"
