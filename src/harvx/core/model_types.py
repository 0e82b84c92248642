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

"""Model types and enumerations for harvx.

This module defines the enumerations shared by the configuration engine and
its logging layer:

- Configuration layers (``ConfigSource``), ordered by precedence
- Field kinds that select a merge rule (``FieldKind``)
- Log output formats and loggable components
"""

from __future__ import annotations

import enum

from harvx.compat import StrEnum, override


class ConfigSource(enum.IntEnum):
    """Configuration layer that supplied a value.

    Members compare by precedence: ``DEFAULT < GLOBAL < REPO < ENV < FLAG``.

    Attributes:
        DEFAULT: Built-in constants (lowest precedence).
        GLOBAL: The user's global ``config.toml``.
        REPO: The repository ``harvx.toml`` or a standalone profile file.
        ENV: ``HARVX_*`` environment variables and target presets.
        FLAG: Explicit CLI flags (highest precedence).
    """

    DEFAULT = 0
    GLOBAL = 1
    REPO = 2
    ENV = 3
    FLAG = 4

    @property
    def label(self) -> str:
        """Return the lowercase layer name used in diagnostics."""
        return self.name.lower()

    @property
    def precedence(self) -> int:
        """Return the numeric precedence; higher values win."""
        return int(self.value)

    @override
    def __str__(self) -> str:
        return self.label

    @classmethod
    def from_str(cls, raw: str) -> ConfigSource:
        """Create a ConfigSource from its label.

        Args:
            raw: Layer label such as ``"repo"`` or ``"flag"``.

        Returns:
            ConfigSource enum value.

        Raises:
            ValueError: If the label does not name a layer.
        """
        value = raw.strip().upper()
        try:
            return cls[value]
        except KeyError as exc:
            msg = f"Unknown config source '{raw}'"
            raise ValueError(msg) from exc


class FieldKind(StrEnum):
    """Value kind of a profile field, which selects its merge rule.

    Attributes:
        STRING: Empty string means unset.
        INTEGER: Zero means unset.
        BOOLEAN: Always taken from the override.
        COLLECTION: Empty list means unset; non-empty replaces wholesale.
    """

    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    COLLECTION = "collection"


class LogFormat(StrEnum):
    """Enumeration of log output formats.

    Attributes:
        TEXT: Human-readable text format.
        JSON: Machine-readable JSON format.
    """

    TEXT = "text"
    JSON = "json"

    @classmethod
    def from_str(cls, raw: str) -> LogFormat:
        """Create a LogFormat enum from a string value.

        Args:
            raw: String representation of the log format.

        Returns:
            LogFormat enum value.

        Raises:
            ValueError: If the string does not match any LogFormat value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unknown log format '{raw}'"
            raise ValueError(msg) from exc


class LogComponent(StrEnum):
    """Enumeration of loggable harvx components."""

    RESOLVER = "resolver"
    INHERITANCE = "inheritance"
    EXTRACT = "extract"
    LOADER = "loader"
    DISCOVERY = "discovery"
    ENVIRONMENT = "environment"

    @classmethod
    def from_str(cls, raw: str) -> LogComponent:
        """Create a LogComponent enum from a string value.

        Args:
            raw: String representation of the component.

        Returns:
            LogComponent enum value.

        Raises:
            ValueError: If the string does not match any LogComponent value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unknown log component '{raw}'"
            raise ValueError(msg) from exc


__all__ = ["ConfigSource", "FieldKind", "LogComponent", "LogFormat"]
