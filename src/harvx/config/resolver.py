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

"""Multi-source configuration resolution.

``resolve_config`` folds five layers into one profile, lowest precedence
first:

1. built-in defaults;
2. the global ``config.toml``;
3. the repository ``harvx.toml``, or a standalone profile file instead;
4. ``HARVX_*`` environment variables, followed by the target preset;
5. CLI flags.

File and environment layers contribute only the keys they explicitly set, and
each key is merged through the primitive for its kind. The target preset and
CLI flags overwrite unconditionally. Every key records the layer that last
supplied its value.

Profile ``extends`` chains are not followed here; callers that need flattened
inheritance use :func:`harvx.config.inheritance.resolve_profile`.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, TypeAlias

from harvx._internal.logging_utils import structured_extra
from harvx.core.model_types import ConfigSource, LogComponent

from .constants import DEFAULT_PROFILE_NAME
from .defaults import default_profile
from .discovery import discover_repo_config
from .discovery import global_config_path as default_global_config_path
from .environment import collect_env_layer, resolve_profile_name
from .extract import extract_profile_layer
from .fields import FieldKey, coerce_field_value, flatten_profile, get_field_value, set_field_value
from .merge import merge_field_value, overrides_base
from .models import ConfigFileNotFoundError, ProfileNotFoundError
from .targets import target_preset_values

if TYPE_CHECKING:
    from .extract import LayerExtraction
    from .models import Profile

logger: logging.Logger = logging.getLogger("harvx.config.resolver")

SourceMap: TypeAlias = "dict[FieldKey, ConfigSource]"


def _empty_flags() -> dict[str, object]:
    return {}


@dataclass(slots=True, frozen=True)
class ResolveOptions:
    """Inputs to :func:`resolve_config`.

    Attributes:
        profile_name: Profile to resolve. Empty or ``None`` falls back to
            ``HARVX_PROFILE`` and then ``default``.
        profile_file: Standalone profile file used instead of the repository
            config. It must exist and must define the active profile.
        target_dir: Directory where the repository config search starts.
        repo_config_path: Explicit repository config path; skips discovery.
        global_config_path: Explicit global config path; skips the platform
            convention.
        cli_flags: Flat flag overrides keyed by field name.
        environ: Environment mapping. ``None`` snapshots ``os.environ``.
    """

    profile_name: str | None = None
    profile_file: Path | None = None
    target_dir: Path = field(default_factory=lambda: Path("."))
    repo_config_path: Path | None = None
    global_config_path: Path | None = None
    cli_flags: Mapping[str, object] = field(default_factory=_empty_flags)
    environ: Mapping[str, str] | None = None


@dataclass(slots=True)
class ResolvedConfig:
    """Outcome of a multi-source resolution.

    Attributes:
        profile: The merged profile. It shares no mutable state with any input
            or with other results.
        sources: The layer that supplied each field's final value.
        profile_name: The active profile name.
    """

    profile: Profile
    sources: dict[FieldKey, ConfigSource]
    profile_name: str

    def source_for(self, key: FieldKey | str) -> ConfigSource:
        """Return the layer that supplied ``key``.

        Args:
            key: Field key or its dotted string form.

        Returns:
            ConfigSource: The supplying layer.

        Raises:
            UnknownFieldKeyError: If ``key`` names no profile field.
        """
        field_key = key if isinstance(key, FieldKey) else FieldKey.from_str(key)
        return self.sources.get(field_key, ConfigSource.DEFAULT)

    def as_flat_dict(self) -> dict[str, object]:
        """Return every field value keyed by its dotted name."""
        return {key.value: value for key, value in flatten_profile(self.profile).items()}


@dataclass(slots=True)
class _Accumulator:
    profile: Profile
    sources: dict[FieldKey, ConfigSource]

    def merge_layer(self, values: Mapping[FieldKey, object], layer: ConfigSource) -> None:
        for key, value in values.items():
            current = get_field_value(self.profile, key)
            set_field_value(self.profile, key, merge_field_value(key.kind, current, value))
            if overrides_base(key.kind, value):
                self.sources[key] = layer

    def overwrite(self, values: Mapping[FieldKey, object], layer: ConfigSource) -> None:
        for key, value in values.items():
            set_field_value(self.profile, key, value)
            self.sources[key] = layer


def _seed() -> _Accumulator:
    return _Accumulator(profile=default_profile(), sources=dict.fromkeys(FieldKey, ConfigSource.DEFAULT))


def _apply_file_layer(
    acc: _Accumulator,
    path: Path,
    profile_name: str,
    layer: ConfigSource,
) -> LayerExtraction:
    extraction = extract_profile_layer(path, profile_name)
    if extraction.found:
        logger.debug(
            "Loading profile %s from %s",
            profile_name,
            path,
            extra=structured_extra(
                LogComponent.RESOLVER,
                profile=profile_name,
                source=layer,
                path=path,
                details={"keys": sorted(key.value for key in extraction.values)},
            ),
        )
        acc.merge_layer(extraction.values, layer)
    return extraction


def _apply_flags(acc: _Accumulator, flags: Mapping[str, object]) -> None:
    values: dict[FieldKey, object] = {}
    for raw_key, raw_value in flags.items():
        key = FieldKey.from_str(raw_key)
        values[key] = coerce_field_value(key, raw_value, source=ConfigSource.FLAG.label)
    acc.overwrite(values, ConfigSource.FLAG)


def _available_profiles(extractions: list[LayerExtraction]) -> list[str]:
    names: set[str] = set()
    for extraction in extractions:
        names.update(extraction.available)
    return sorted(names)


def resolve_config(options: ResolveOptions | None = None) -> ResolvedConfig:
    """Resolve the active profile across every configuration layer.

    Args:
        options: Resolution inputs; ``None`` uses the defaults.

    Returns:
        ResolvedConfig: The merged profile with per-field attribution.

    Raises:
        ConfigFileNotFoundError: If ``profile_file`` does not exist.
        MalformedConfigError: If a config file cannot be read or decoded.
        ProfileNotFoundError: If a non-default profile is defined in no loaded
            file, or the profile file lacks the active profile.
        UnknownTargetPresetError: If the accumulated ``target`` is unknown.
        UnknownFieldKeyError: If a CLI flag names no profile field.
        ConfigFieldTypeError: If a CLI flag value has the wrong type.
    """
    opts = options or ResolveOptions()
    environ: Mapping[str, str] = dict(os.environ) if opts.environ is None else opts.environ
    profile_name = resolve_profile_name(opts.profile_name, environ)
    logger.debug(
        "Resolving config for profile %s",
        profile_name,
        extra=structured_extra(
            LogComponent.RESOLVER,
            profile=profile_name,
            path=opts.target_dir,
            details={"profile_file": str(opts.profile_file) if opts.profile_file else None},
        ),
    )

    acc = _seed()
    extractions: list[LayerExtraction] = []

    global_path = opts.global_config_path or default_global_config_path(environ)
    if global_path is not None:
        extractions.append(_apply_file_layer(acc, global_path, profile_name, ConfigSource.GLOBAL))

    if opts.profile_file is not None:
        if not opts.profile_file.exists():
            raise ConfigFileNotFoundError(str(opts.profile_file))
        extraction = _apply_file_layer(acc, opts.profile_file, profile_name, ConfigSource.REPO)
        if not extraction.found:
            raise ProfileNotFoundError(profile_name, available=extraction.available)
        extractions.append(extraction)
    else:
        repo_path = opts.repo_config_path or discover_repo_config(opts.target_dir)
        if repo_path is not None:
            extractions.append(_apply_file_layer(acc, repo_path, profile_name, ConfigSource.REPO))

    if profile_name != DEFAULT_PROFILE_NAME and not any(item.found for item in extractions):
        raise ProfileNotFoundError(profile_name, available=_available_profiles(extractions))

    acc.merge_layer(collect_env_layer(environ), ConfigSource.ENV)

    if acc.profile.target:
        # Preset fields count as env-sourced whichever layer supplied the target.
        acc.overwrite(target_preset_values(acc.profile.target), ConfigSource.ENV)

    if opts.cli_flags:
        _apply_flags(acc, opts.cli_flags)

    logger.debug(
        "Resolved profile %s (format=%s, max_tokens=%d, target=%s)",
        profile_name,
        acc.profile.format,
        acc.profile.max_tokens,
        acc.profile.target or "none",
        extra=structured_extra(LogComponent.RESOLVER, profile=profile_name),
    )
    return ResolvedConfig(profile=acc.profile, sources=acc.sources, profile_name=profile_name)


__all__ = ["ResolveOptions", "ResolvedConfig", "SourceMap", "resolve_config"]
