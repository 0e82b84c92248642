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

"""LLM target presets.

A preset bundles the output format and token budget suited to one model
family. Presets only carry the keys they set; ``generic`` leaves the token
budget alone.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from .fields import FieldKey, set_field_value
from .merge import clone_profile
from .models import UnknownTargetPresetError

if TYPE_CHECKING:
    from .models import Profile

TARGET_PRESETS: Final[Mapping[str, Mapping[FieldKey, object]]] = MappingProxyType({
    "claude": MappingProxyType({FieldKey.FORMAT: "xml", FieldKey.MAX_TOKENS: 200_000}),
    "chatgpt": MappingProxyType({FieldKey.FORMAT: "markdown", FieldKey.MAX_TOKENS: 128_000}),
    "generic": MappingProxyType({FieldKey.FORMAT: "markdown"}),
})


def target_preset_values(target: str) -> dict[FieldKey, object]:
    """Return the values applied by the preset named ``target``.

    Args:
        target: Preset name. An empty string selects no preset.

    Returns:
        A new mapping of the keys the preset sets; empty for ``""``.

    Raises:
        UnknownTargetPresetError: If ``target`` names no known preset.
    """
    if not target:
        return {}
    try:
        preset = TARGET_PRESETS[target]
    except KeyError as exc:
        raise UnknownTargetPresetError(target, sorted(TARGET_PRESETS)) from exc
    return dict(preset)


def apply_target_preset(profile: Profile, target: str) -> Profile:
    """Return a copy of ``profile`` with the ``target`` preset applied.

    Preset values overwrite unconditionally; ``profile`` is not modified.
    """
    result = clone_profile(profile)
    for key, value in target_preset_values(target).items():
        set_field_value(result, key, value)
    return result


__all__ = ["TARGET_PRESETS", "apply_target_preset", "target_preset_values"]
