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

"""Closed registry of flat profile field keys.

Every layer of the resolver exchanges values keyed by ``FieldKey`` rather than
by free-form strings, so a misspelt key fails loudly instead of creating an
unattributed value. Nested fields use dotted keys (``relevance.tier_0``,
``redaction_config.enabled``).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Final, cast

from harvx.compat import StrEnum
from harvx.core.model_types import FieldKind

from .models import ConfigFieldTypeError, Profile, UnknownFieldKeyError

if TYPE_CHECKING:
    from harvx.compat import Self


class FieldKey(StrEnum):
    """Flat key of every mergeable profile field."""

    OUTPUT = "output"
    FORMAT = "format"
    MAX_TOKENS = "max_tokens"
    TOKENIZER = "tokenizer"
    COMPRESSION = "compression"
    REDACTION = "redaction"
    TARGET = "target"
    IGNORE = "ignore"
    PRIORITY_FILES = "priority_files"
    INCLUDE = "include"
    TIER_0 = "relevance.tier_0"
    TIER_1 = "relevance.tier_1"
    TIER_2 = "relevance.tier_2"
    TIER_3 = "relevance.tier_3"
    TIER_4 = "relevance.tier_4"
    TIER_5 = "relevance.tier_5"
    REDACTION_ENABLED = "redaction_config.enabled"
    REDACTION_EXCLUDE_PATHS = "redaction_config.exclude_paths"
    REDACTION_CONFIDENCE_THRESHOLD = "redaction_config.confidence_threshold"

    @property
    def kind(self) -> FieldKind:
        """Return the value kind that selects this field's merge rule."""
        return _FIELD_KINDS[self]

    @property
    def path(self) -> tuple[str, ...]:
        """Return the attribute path from ``Profile`` to this field."""
        return tuple(self.value.split("."))

    @classmethod
    def from_str(cls, raw: str) -> Self:
        """Create a FieldKey from its flat string form.

        Args:
            raw: Flat key such as ``"max_tokens"`` or ``"relevance.tier_2"``.

        Returns:
            FieldKey enum value.

        Raises:
            UnknownFieldKeyError: If the key does not name a profile field.
        """
        try:
            return cls(raw.strip())
        except ValueError as exc:
            raise UnknownFieldKeyError(raw, [member.value for member in cls]) from exc


_FIELD_KINDS: Final[Mapping[FieldKey, FieldKind]] = {
    FieldKey.OUTPUT: FieldKind.STRING,
    FieldKey.FORMAT: FieldKind.STRING,
    FieldKey.MAX_TOKENS: FieldKind.INTEGER,
    FieldKey.TOKENIZER: FieldKind.STRING,
    FieldKey.COMPRESSION: FieldKind.BOOLEAN,
    FieldKey.REDACTION: FieldKind.BOOLEAN,
    FieldKey.TARGET: FieldKind.STRING,
    FieldKey.IGNORE: FieldKind.COLLECTION,
    FieldKey.PRIORITY_FILES: FieldKind.COLLECTION,
    FieldKey.INCLUDE: FieldKind.COLLECTION,
    FieldKey.TIER_0: FieldKind.COLLECTION,
    FieldKey.TIER_1: FieldKind.COLLECTION,
    FieldKey.TIER_2: FieldKind.COLLECTION,
    FieldKey.TIER_3: FieldKind.COLLECTION,
    FieldKey.TIER_4: FieldKind.COLLECTION,
    FieldKey.TIER_5: FieldKind.COLLECTION,
    FieldKey.REDACTION_ENABLED: FieldKind.BOOLEAN,
    FieldKey.REDACTION_EXCLUDE_PATHS: FieldKind.COLLECTION,
    FieldKey.REDACTION_CONFIDENCE_THRESHOLD: FieldKind.STRING,
}

_EXPECTED_TYPES: Final[Mapping[FieldKind, str]] = {
    FieldKind.STRING: "a string",
    FieldKind.INTEGER: "an integer",
    FieldKind.BOOLEAN: "a boolean",
    FieldKind.COLLECTION: "an array of strings",
}


def coerce_field_value(key: FieldKey, value: object, *, source: str | None = None) -> object:
    """Validate a raw value for ``key`` and normalise it.

    Integers are normalised to plain ``int`` (booleans are rejected), and
    collections become a new ``list`` keeping only their string items.

    Args:
        key: Field the value is destined for.
        value: Raw value decoded from TOML or supplied by a caller.
        source: Optional layer or file name used in error messages.

    Returns:
        The normalised value.

    Raises:
        ConfigFieldTypeError: If the value does not match the field kind.
    """
    kind = key.kind
    match kind:
        case FieldKind.STRING:
            if isinstance(value, str):
                return value
        case FieldKind.INTEGER:
            if isinstance(value, int) and not isinstance(value, bool):
                return int(value)
        case FieldKind.BOOLEAN:
            if isinstance(value, bool):
                return value
        case FieldKind.COLLECTION:
            if isinstance(value, (list, tuple)):
                return [item for item in cast("Iterable[object]", value) if isinstance(item, str)]
    raise ConfigFieldTypeError(key.value, _EXPECTED_TYPES[kind], source=source)


def get_field_value(profile: Profile, key: FieldKey) -> object:
    """Return the current value of ``key`` on ``profile``.

    Collections are returned by reference; copy them before handing them out.
    """
    *parents, leaf = key.path
    target: object = profile
    for part in parents:
        target = getattr(target, part)
    return getattr(target, leaf)


def set_field_value(profile: Profile, key: FieldKey, value: object) -> None:
    """Assign ``value`` to ``key`` on ``profile``, copying collections."""
    *parents, leaf = key.path
    target: object = profile
    for part in parents:
        target = getattr(target, part)
    if isinstance(value, list):
        value = list(cast("list[str]", value))
    setattr(target, leaf, value)


def flatten_profile(profile: Profile) -> dict[FieldKey, object]:
    """Return every field of ``profile`` as a flat mapping.

    Args:
        profile: Profile to flatten. It is not modified.

    Returns:
        Mapping of each ``FieldKey`` to its value; collections are copies.
    """
    flat: dict[FieldKey, object] = {}
    for key in FieldKey:
        value = get_field_value(profile, key)
        flat[key] = list(cast("list[str]", value)) if isinstance(value, list) else value
    return flat


__all__ = [
    "FieldKey",
    "coerce_field_value",
    "flatten_profile",
    "get_field_value",
    "set_field_value",
]
