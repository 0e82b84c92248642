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

"""Typed loading of every ``[profile.*]`` table in a TOML source.

The resolver reads layers through :mod:`harvx.config.extract`, which keeps
track of which keys were present. Tools that need whole profiles, such as the
inheritance resolver and profile linting, load them here instead: each table
is validated with pydantic and converted to a ``Profile``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, cast

from pydantic import BaseModel, ValidationError

from harvx._internal.logging_utils import structured_extra
from harvx.core.model_types import LogComponent

from .constants import PROFILE_TABLE_KEY
from .extract import read_config_tree, source_name
from .models import (
    ConfigModel,
    InvalidConfigFileError,
    ProfileModel,
    RedactionSettingsModel,
    TierSetModel,
    profile_from_model,
)

if TYPE_CHECKING:
    from .extract import ConfigInput
    from .models import Profile

logger: logging.Logger = logging.getLogger("harvx.config.loader")

_NESTED_MODELS: Final[Mapping[str, type[BaseModel]]] = {
    "relevance": TierSetModel,
    "redaction_config": RedactionSettingsModel,
}


def _empty_profiles() -> dict[str, Profile]:
    return {}


def _empty_keys() -> tuple[str, ...]:
    return ()


@dataclass(slots=True, frozen=True)
class LoadedProfiles:
    """Profiles loaded from one source.

    Attributes:
        source: Display name of the source.
        profiles: Validated profiles keyed by name; empty when the file is missing.
        unknown_keys: Dotted keys that were present but not recognised, sorted.
        exists: False when the source file does not exist.
    """

    source: str
    profiles: dict[str, Profile] = field(default_factory=_empty_profiles)
    unknown_keys: tuple[str, ...] = field(default_factory=_empty_keys)
    exists: bool = True


def _unknown_keys_in(table: Mapping[str, object], model: type[BaseModel], prefix: str) -> list[str]:
    unknown: list[str] = []
    for key, value in table.items():
        dotted = f"{prefix}.{key}"
        if key not in model.model_fields:
            unknown.append(dotted)
            continue
        nested = _NESTED_MODELS.get(key)
        if nested is not None and model is ProfileModel and isinstance(value, Mapping):
            unknown.extend(_unknown_keys_in(cast("Mapping[str, object]", value), nested, dotted))
    return unknown


def find_unknown_keys(tree: Mapping[str, object]) -> list[str]:
    """Return dotted names of unrecognised keys inside ``[profile.*]`` tables.

    Args:
        tree: Decoded TOML document.

    Returns:
        Sorted dotted keys such as ``profile.work.colour``.
    """
    profiles = tree.get(PROFILE_TABLE_KEY)
    if not isinstance(profiles, Mapping):
        return []
    unknown: list[str] = []
    for name, table in cast("Mapping[str, object]", profiles).items():
        if isinstance(table, Mapping):
            prefix = f"{PROFILE_TABLE_KEY}.{name}"
            unknown.extend(_unknown_keys_in(cast("Mapping[str, object]", table), ProfileModel, prefix))
    return sorted(unknown)


def load_profiles_with_metadata(source: ConfigInput) -> LoadedProfiles:
    """Load and validate every profile table in ``source``.

    Unknown keys are reported with a warning and otherwise ignored so that
    older builds can read files written for newer ones.

    Args:
        source: File path or in-memory document.

    Returns:
        LoadedProfiles: Validated profiles plus diagnostics.

    Raises:
        MalformedConfigError: If the source cannot be read or decoded.
        InvalidConfigFileError: If a profile table fails validation.
    """
    name = source_name(source)
    tree = read_config_tree(source)
    if tree is None:
        return LoadedProfiles(source=name, exists=False)

    unknown = tuple(find_unknown_keys(tree))
    if unknown:
        logger.warning(
            "Ignoring unknown keys in %s: %s",
            name,
            ", ".join(unknown),
            extra=structured_extra(LogComponent.LOADER, path=name, details={"unknown_keys": list(unknown)}),
        )

    try:
        model = ConfigModel.model_validate(tree)
    except ValidationError as exc:
        raise InvalidConfigFileError(name, exc) from exc

    profiles = {profile_name: profile_from_model(table) for profile_name, table in model.profile.items()}
    logger.debug(
        "Loaded %d profile(s) from %s",
        len(profiles),
        name,
        extra=structured_extra(LogComponent.LOADER, path=name, details={"profiles": sorted(profiles)}),
    )
    return LoadedProfiles(source=name, profiles=profiles, unknown_keys=unknown)


def load_profiles(source: ConfigInput) -> dict[str, Profile]:
    """Return the validated profiles defined in ``source``.

    A missing file yields an empty mapping.
    """
    return load_profiles_with_metadata(source).profiles


__all__ = ["LoadedProfiles", "find_unknown_keys", "load_profiles", "load_profiles_with_metadata"]
