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

"""Per-type merge rules used by profile inheritance and layered resolution.

Rules (the override always wins when it is set):

- strings: the override applies when non-empty;
- integers: the override applies when non-zero;
- booleans: the override always applies, since ``False`` is a meaningful value;
- collections: a non-empty override replaces the base wholesale, never unions.

Every function returns new objects; neither argument is mutated and no list in
a result shares storage with a list in either argument.
"""

from __future__ import annotations

from collections.abc import Sequence, Sized
from typing import cast

from harvx.core.model_types import FieldKind

from .models import Profile, RedactionSettings, TierSet


def merge_string(base: str, override: str) -> str:
    """Return ``override`` if non-empty, otherwise ``base``."""
    return override if override else base


def merge_int(base: int, override: int) -> int:
    """Return ``override`` if non-zero, otherwise ``base``.

    Zero is indistinguishable from "unset", so an explicit ``0`` never
    overrides a parent value.
    """
    return override if override != 0 else base


def merge_bool(base: bool, override: bool) -> bool:  # noqa: ARG001, FBT001
    """Return ``override``; booleans have no "unset" sentinel."""
    return override


def merge_collection(base: Sequence[str], override: Sequence[str]) -> list[str]:
    """Return a fresh copy of ``override`` if non-empty, else of ``base``."""
    return list(override) if override else list(base)


def merge_tier_set(base: TierSet, override: TierSet) -> TierSet:
    """Merge each relevance tier independently."""
    return TierSet(
        tier_0=merge_collection(base.tier_0, override.tier_0),
        tier_1=merge_collection(base.tier_1, override.tier_1),
        tier_2=merge_collection(base.tier_2, override.tier_2),
        tier_3=merge_collection(base.tier_3, override.tier_3),
        tier_4=merge_collection(base.tier_4, override.tier_4),
        tier_5=merge_collection(base.tier_5, override.tier_5),
    )


def merge_redaction_settings(base: RedactionSettings, override: RedactionSettings) -> RedactionSettings:
    """Merge redaction settings field by field."""
    return RedactionSettings(
        enabled=merge_bool(base.enabled, override.enabled),
        exclude_paths=merge_collection(base.exclude_paths, override.exclude_paths),
        confidence_threshold=merge_string(base.confidence_threshold, override.confidence_threshold),
    )


def merge_profile(base: Profile, override: Profile) -> Profile:
    """Apply ``override`` on top of ``base`` and return a new profile.

    Args:
        base: Parent profile supplying values for unset fields.
        override: Child profile whose set fields win.

    Returns:
        The merged profile. Its ``extends`` is always ``None`` because the
        result is fully resolved.
    """
    return Profile(
        output=merge_string(base.output, override.output),
        format=merge_string(base.format, override.format),
        max_tokens=merge_int(base.max_tokens, override.max_tokens),
        tokenizer=merge_string(base.tokenizer, override.tokenizer),
        compression=merge_bool(base.compression, override.compression),
        redaction=merge_bool(base.redaction, override.redaction),
        target=merge_string(base.target, override.target),
        ignore=merge_collection(base.ignore, override.ignore),
        include=merge_collection(base.include, override.include),
        priority_files=merge_collection(base.priority_files, override.priority_files),
        relevance=merge_tier_set(base.relevance, override.relevance),
        redaction_config=merge_redaction_settings(base.redaction_config, override.redaction_config),
        extends=None,
    )


def merge_field_value(kind: FieldKind, base: object, override: object) -> object:
    """Merge two values of a single flat field using the rule for ``kind``.

    Args:
        kind: Value kind of the field.
        base: Current value.
        override: Incoming value from a higher-precedence layer.

    Returns:
        The merged value; collections are always fresh lists.
    """
    match kind:
        case FieldKind.STRING:
            return merge_string(cast("str", base), cast("str", override))
        case FieldKind.INTEGER:
            return merge_int(cast("int", base), cast("int", override))
        case FieldKind.BOOLEAN:
            return merge_bool(cast("bool", base), cast("bool", override))
        case FieldKind.COLLECTION:
            return merge_collection(cast("Sequence[str]", base), cast("Sequence[str]", override))


def overrides_base(kind: FieldKind, override: object) -> bool:
    """Return True when ``override`` would replace the base under the rule for ``kind``."""
    match kind:
        case FieldKind.BOOLEAN:
            return True
        case FieldKind.INTEGER:
            return cast("int", override) != 0
        case FieldKind.STRING | FieldKind.COLLECTION:
            return bool(cast("Sized", override))


def clone_profile(profile: Profile) -> Profile:
    """Return a deep copy of ``profile`` with independent collections."""
    return Profile(
        output=profile.output,
        format=profile.format,
        max_tokens=profile.max_tokens,
        tokenizer=profile.tokenizer,
        compression=profile.compression,
        redaction=profile.redaction,
        target=profile.target,
        ignore=list(profile.ignore),
        include=list(profile.include),
        priority_files=list(profile.priority_files),
        relevance=merge_tier_set(TierSet(), profile.relevance),
        redaction_config=RedactionSettings(
            enabled=profile.redaction_config.enabled,
            exclude_paths=list(profile.redaction_config.exclude_paths),
            confidence_threshold=profile.redaction_config.confidence_threshold,
        ),
        extends=profile.extends,
    )


__all__ = [
    "clone_profile",
    "merge_bool",
    "merge_collection",
    "merge_field_value",
    "merge_int",
    "merge_profile",
    "merge_redaction_settings",
    "merge_string",
    "merge_tier_set",
    "overrides_base",
]
