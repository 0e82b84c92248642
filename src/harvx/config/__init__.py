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

"""Configuration resolution for harvx.

This package merges profile settings from built-in defaults, the global user
config, the repository ``harvx.toml``, ``HARVX_*`` environment variables and
CLI flags, and flattens profile inheritance chains.
"""

from __future__ import annotations

from .defaults import default_profile, default_tier_set
from .discovery import discover_global_config, discover_repo_config, global_config_path
from .environment import collect_env_layer, resolve_profile_name
from .extract import ConfigDocument, LayerExtraction, LayerStatus, extract_profile_layer
from .fields import FieldKey, coerce_field_value, flatten_profile
from .inheritance import ProfileResolution, resolve_profile
from .loader import LoadedProfiles, load_profiles, load_profiles_with_metadata
from .merge import (
    clone_profile,
    merge_bool,
    merge_collection,
    merge_field_value,
    merge_int,
    merge_profile,
    merge_redaction_settings,
    merge_string,
    merge_tier_set,
)
from .models import (
    ConfigFieldTypeError,
    ConfigFileNotFoundError,
    ConfigValidationError,
    InvalidConfigFileError,
    MalformedConfigError,
    Profile,
    ProfileCycleError,
    ProfileNotFoundError,
    RedactionSettings,
    TierSet,
    UnknownFieldKeyError,
    UnknownTargetPresetError,
)
from .resolver import ResolvedConfig, ResolveOptions, SourceMap, resolve_config
from .targets import TARGET_PRESETS, apply_target_preset, target_preset_values

__all__ = [
    "TARGET_PRESETS",
    "ConfigDocument",
    "ConfigFieldTypeError",
    "ConfigFileNotFoundError",
    "ConfigValidationError",
    "FieldKey",
    "InvalidConfigFileError",
    "LayerExtraction",
    "LayerStatus",
    "LoadedProfiles",
    "MalformedConfigError",
    "Profile",
    "ProfileCycleError",
    "ProfileNotFoundError",
    "ProfileResolution",
    "RedactionSettings",
    "ResolveOptions",
    "ResolvedConfig",
    "SourceMap",
    "TierSet",
    "UnknownFieldKeyError",
    "UnknownTargetPresetError",
    "apply_target_preset",
    "clone_profile",
    "coerce_field_value",
    "collect_env_layer",
    "default_profile",
    "default_tier_set",
    "discover_global_config",
    "discover_repo_config",
    "extract_profile_layer",
    "flatten_profile",
    "global_config_path",
    "load_profiles",
    "load_profiles_with_metadata",
    "merge_bool",
    "merge_collection",
    "merge_field_value",
    "merge_int",
    "merge_profile",
    "merge_redaction_settings",
    "merge_string",
    "merge_tier_set",
    "resolve_config",
    "resolve_profile",
    "resolve_profile_name",
    "target_preset_values",
]
