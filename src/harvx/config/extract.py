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

"""Extraction of one profile's explicitly-set keys from a TOML source.

The document is decoded into an untyped tree instead of a typed model so that
a key absent from the file can be told apart from a key set to its zero value.
Only recognised profile keys are returned, flattened to ``FieldKey`` entries;
any other key is ignored here.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, TypeAlias, cast

from harvx._internal.logging_utils import structured_extra
from harvx.compat import StrEnum, tomllib
from harvx.core.model_types import LogComponent

from .constants import PROFILE_TABLE_KEY
from .fields import FieldKey, coerce_field_value
from .models import ConfigFieldTypeError, MalformedConfigError

logger: logging.Logger = logging.getLogger("harvx.config.extract")

_POSITION_PATTERN: Final[re.Pattern[str]] = re.compile(r"line (\d+), column (\d+)")


@dataclass(slots=True, frozen=True)
class ConfigDocument:
    """In-memory TOML document.

    Attributes:
        name: Label used in log records and error messages.
        text: TOML source text.
    """

    name: str
    text: str


ConfigInput: TypeAlias = "Path | ConfigDocument"


class LayerStatus(StrEnum):
    """Outcome of extracting a profile from one source.

    Attributes:
        FOUND: The profile table exists; values were extracted.
        FILE_MISSING: The source file does not exist.
        NO_PROFILE_TABLE: The source has no ``[profile]`` table.
        PROFILE_MISSING: The ``[profile]`` table lacks the requested name.
    """

    FOUND = "found"
    FILE_MISSING = "file_missing"
    NO_PROFILE_TABLE = "no_profile_table"
    PROFILE_MISSING = "profile_missing"


def _empty_values() -> dict[FieldKey, object]:
    return {}


@dataclass(slots=True, frozen=True)
class LayerExtraction:
    """Keys explicitly set for one profile in one source.

    Attributes:
        source: Display name of the source (file path or document name).
        status: Extraction outcome.
        values: Flat values; empty unless ``status`` is ``FOUND``.
        available: Profile names defined in the source, sorted.
    """

    source: str
    status: LayerStatus
    values: dict[FieldKey, object] = field(default_factory=_empty_values)
    available: tuple[str, ...] = ()

    @property
    def found(self) -> bool:
        """Return True when the requested profile was present."""
        return self.status is LayerStatus.FOUND


def source_name(source: ConfigInput) -> str:
    """Return the display name of a configuration source."""
    if isinstance(source, ConfigDocument):
        return source.name
    return str(source)


def _decode_error(source: str, exc: tomllib.TOMLDecodeError) -> MalformedConfigError:
    line = cast("int | None", getattr(exc, "lineno", None))
    column = cast("int | None", getattr(exc, "colno", None))
    detail = cast("str", getattr(exc, "msg", None) or str(exc))
    if line is None:
        match = _POSITION_PATTERN.search(str(exc))
        if match is not None:
            line, column = int(match.group(1)), int(match.group(2))
    return MalformedConfigError(source, detail, line=line, column=column)


def read_config_tree(source: ConfigInput) -> dict[str, object] | None:
    """Decode ``source`` into an untyped TOML tree.

    Args:
        source: File path or in-memory document.

    Returns:
        The decoded tree, or ``None`` when the file does not exist.

    Raises:
        MalformedConfigError: If the source cannot be read or decoded.
    """
    name = source_name(source)
    try:
        if isinstance(source, ConfigDocument):
            return tomllib.loads(source.text)
        with source.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError:
        logger.debug(
            "Config file not found, skipping: %s",
            name,
            extra=structured_extra(LogComponent.EXTRACT, path=name),
        )
        return None
    except tomllib.TOMLDecodeError as exc:
        raise _decode_error(name, exc) from exc
    except OSError as exc:
        raise MalformedConfigError(name, f"unable to read file: {exc}") from exc


def profile_names(tree: Mapping[str, object]) -> tuple[str, ...]:
    """Return the sorted profile names defined in a decoded tree."""
    table = tree.get(PROFILE_TABLE_KEY)
    if not isinstance(table, dict):
        return ()
    return tuple(sorted(cast("dict[str, object]", table)))


def flatten_profile_table(table: Mapping[str, object], *, source: str) -> dict[FieldKey, object]:
    """Flatten the recognised keys of a raw profile table.

    Args:
        table: Raw ``[profile.<name>]`` table.
        source: Name used in error messages.

    Returns:
        Flat mapping containing only the keys present in ``table``.

    Raises:
        MalformedConfigError: If a recognised key holds a value of the wrong type.
    """
    flat: dict[FieldKey, object] = {}
    for key in FieldKey:
        *parents, leaf = key.path
        node: object = table
        for part in parents:
            node = cast("Mapping[str, object]", node).get(part) if isinstance(node, Mapping) else None
        if not isinstance(node, Mapping) or leaf not in node:
            continue
        raw = cast("Mapping[str, object]", node)[leaf]
        try:
            flat[key] = coerce_field_value(key, raw)
        except ConfigFieldTypeError as exc:
            raise MalformedConfigError(source, str(exc)) from exc
    return flat


def extract_profile_layer(source: ConfigInput, profile_name: str) -> LayerExtraction:
    """Extract the keys explicitly set for ``profile_name`` in ``source``.

    A missing file, a missing ``[profile]`` table and a missing profile are
    ordinary outcomes reported through ``LayerExtraction.status``.

    Args:
        source: File path or in-memory document.
        profile_name: Profile to extract.

    Returns:
        The extraction result.

    Raises:
        MalformedConfigError: If the source is unreadable, is not valid TOML,
            or holds a wrongly typed value for a recognised key.
    """
    name = source_name(source)
    tree = read_config_tree(source)
    if tree is None:
        return LayerExtraction(name, LayerStatus.FILE_MISSING)

    profiles = tree.get(PROFILE_TABLE_KEY)
    if not isinstance(profiles, dict):
        logger.debug(
            "No [profile] table in %s",
            name,
            extra=structured_extra(LogComponent.EXTRACT, path=name, profile=profile_name),
        )
        return LayerExtraction(name, LayerStatus.NO_PROFILE_TABLE)

    available = profile_names(tree)
    raw_profile = cast("dict[str, object]", profiles).get(profile_name)
    if not isinstance(raw_profile, dict):
        logger.debug(
            "Profile %s not found in %s (available: %s)",
            profile_name,
            name,
            ", ".join(available) or "none",
            extra=structured_extra(LogComponent.EXTRACT, path=name, profile=profile_name),
        )
        return LayerExtraction(name, LayerStatus.PROFILE_MISSING, available=available)

    values = flatten_profile_table(cast("dict[str, object]", raw_profile), source=name)
    return LayerExtraction(name, LayerStatus.FOUND, values=values, available=available)


__all__ = [
    "ConfigDocument",
    "ConfigInput",
    "LayerExtraction",
    "LayerStatus",
    "extract_profile_layer",
    "flatten_profile_table",
    "profile_names",
    "read_config_tree",
    "source_name",
]
