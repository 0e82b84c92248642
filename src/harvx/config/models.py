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

"""Configuration models and errors for harvx.

This module defines the runtime dataclasses that describe a profile (``Profile``
with its nested ``TierSet`` and ``RedactionSettings``), the Pydantic models used
to validate ``[profile.*]`` tables loaded from TOML, and the exception types
raised while loading and resolving configuration.

A profile field holding its zero value (``""``, ``0``, ``False`` or ``[]``) is
treated as unset by the merge rules in :mod:`harvx.config.merge`.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, field_validator

from harvx._internal.exceptions import HarvxError, HarvxValidationError
from harvx.core.type_aliases import ProfileName


class ConfigValidationError(HarvxValidationError):
    """Raised when configuration data contains invalid values."""


class ConfigFieldTypeError(ConfigValidationError):
    """Raised when a configuration field holds a value of the wrong type."""

    def __init__(self, field: str, expected: str, *, source: str | None = None) -> None:
        """Initialize the exception with the offending field.

        Args:
            field: Dotted name of the field with an invalid value.
            expected: Human-readable description of the expected type.
            source: Optional name of the file or layer that supplied the value.
        """
        self.field = field
        self.expected = expected
        self.source = source
        location = f" in {source}" if source else ""
        super().__init__(f"{field} must be {expected}{location}")


class UnknownFieldKeyError(ConfigValidationError):
    """Raised when a flat override key does not name a profile field."""

    def __init__(self, key: str, allowed: Sequence[str]) -> None:
        """Initialize the exception with the unknown key and the valid keys.

        Args:
            key: The key that was not recognised.
            allowed: Every valid flat field key.
        """
        self.key = key
        self.allowed = tuple(allowed)
        super().__init__(f"unknown config field '{key}' (allowed: {', '.join(self.allowed)})")


class MalformedConfigError(ConfigValidationError):
    """Raised when a configuration source cannot be decoded."""

    def __init__(
        self,
        source: str,
        detail: str,
        *,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize the exception with the source name and decoder details.

        Args:
            source: File path or document name that failed to decode.
            detail: Decoder or type-check message.
            line: 1-based line of the failure, when the decoder reports it.
            column: 1-based column of the failure, when the decoder reports it.
        """
        self.source = source
        self.detail = detail
        self.line = line
        self.column = column
        position = ""
        if line is not None:
            position = f" (line {line}" + (f", column {column})" if column is not None else ")")
        super().__init__(f"malformed config {source}{position}: {detail}")


class InvalidConfigFileError(ConfigValidationError):
    """Raised when a profile table fails schema validation."""

    def __init__(self, source: str, error: Exception) -> None:
        """Initialize the exception with the source name and validation error.

        Args:
            source: File path or document name that failed validation.
            error: The underlying validation exception.
        """
        self.source = source
        self.error = error
        super().__init__(f"Invalid harvx configuration in {source}: {error}")


class ConfigFileNotFoundError(HarvxError, FileNotFoundError):
    """Raised when an explicitly requested configuration file does not exist."""

    def __init__(self, path: str) -> None:
        """Initialize the exception with the missing path.

        Args:
            path: The path that was requested but not found.
        """
        self.path = path
        super().__init__(f"config file not found: {path}")


class ProfileNotFoundError(HarvxError, LookupError):
    """Raised when a requested profile name is not defined anywhere."""

    def __init__(
        self,
        profile: str,
        *,
        available: Sequence[str] = (),
        extended_by: str | None = None,
    ) -> None:
        """Initialize the exception with the missing profile name.

        Args:
            profile: Name of the profile that could not be found.
            available: Profile names that were found, for the error message.
            extended_by: Name of the child profile whose ``extends`` referenced
                the missing profile, if any.
        """
        self.profile = profile
        self.available = tuple(available)
        self.extended_by = extended_by
        message = f"profile '{profile}' is not defined"
        if extended_by is not None:
            message += f" (extended by '{extended_by}')"
        if self.available:
            message += f"; available profiles: {', '.join(self.available)}"
        super().__init__(message)


class ProfileCycleError(ConfigValidationError):
    """Raised when profile inheritance forms a cycle."""

    def __init__(self, cycle: Sequence[str]) -> None:
        """Initialize the exception with the repeated inheritance path.

        Args:
            cycle: Profile names from the first visit to the repeated name,
                e.g. ``("a", "b", "a")``.
        """
        self.cycle = tuple(cycle)
        super().__init__(f"circular profile inheritance: {' -> '.join(self.cycle)}")


class UnknownTargetPresetError(ConfigValidationError):
    """Raised when ``target`` names a preset that does not exist."""

    def __init__(self, target: str, allowed: Sequence[str]) -> None:
        """Initialize the exception with the unknown target and valid choices.

        Args:
            target: The target name that did not match a preset.
            allowed: The preset names that are supported.
        """
        self.target = target
        self.allowed = tuple(allowed)
        super().__init__(f"unknown target '{target}' (allowed: {', '.join(self.allowed)})")


def _default_list_str() -> list[str]:
    return []


@dataclass(slots=True)
class TierSet:
    """Glob patterns for the six ordered relevance tiers.

    Files are assigned to the lowest-numbered matching tier; tier 0 holds the
    highest-priority files.
    """

    tier_0: list[str] = field(default_factory=_default_list_str)
    tier_1: list[str] = field(default_factory=_default_list_str)
    tier_2: list[str] = field(default_factory=_default_list_str)
    tier_3: list[str] = field(default_factory=_default_list_str)
    tier_4: list[str] = field(default_factory=_default_list_str)
    tier_5: list[str] = field(default_factory=_default_list_str)


@dataclass(slots=True)
class RedactionSettings:
    """Fine-grained secret redaction settings.

    Attributes:
        enabled: Whether secret redaction runs for this profile.
        exclude_paths: Glob patterns of paths skipped during redaction scanning.
        confidence_threshold: Minimum detection confidence (``low``, ``medium``
            or ``high``).
    """

    enabled: bool = False
    exclude_paths: list[str] = field(default_factory=_default_list_str)
    confidence_threshold: str = ""


def _default_tier_set() -> TierSet:
    return TierSet()


def _default_redaction_settings() -> RedactionSettings:
    return RedactionSettings()


@dataclass(slots=True)
class Profile:
    """All settings for a single named profile.

    Attributes:
        output: File path of the generated context document.
        format: Output format (``markdown``, ``xml`` or ``plain``).
        max_tokens: Token budget cap for the generated output.
        tokenizer: Token counting model (``cl100k_base`` or ``o200k_base``).
        compression: Whether source compression is enabled.
        redaction: Whether secret redaction is enabled.
        target: LLM target preset name (``claude``, ``chatgpt``, ``generic``).
        ignore: Glob patterns skipped during discovery.
        include: Glob patterns included even when otherwise ignored.
        priority_files: Files emitted before any tier-based ordering.
        relevance: Per-tier glob patterns.
        redaction_config: Nested redaction settings.
        extends: Name of the parent profile, or ``None``.
    """

    output: str = ""
    format: str = ""
    max_tokens: int = 0
    tokenizer: str = ""
    compression: bool = False
    redaction: bool = False
    target: str = ""
    ignore: list[str] = field(default_factory=_default_list_str)
    include: list[str] = field(default_factory=_default_list_str)
    priority_files: list[str] = field(default_factory=_default_list_str)
    relevance: TierSet = field(default_factory=_default_tier_set)
    redaction_config: RedactionSettings = field(default_factory=_default_redaction_settings)
    extends: ProfileName | None = None


class TierSetModel(BaseModel):
    """Pydantic model for the ``[profile.<name>.relevance]`` table."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="ignore")

    tier_0: list[StrictStr] = Field(default_factory=list)
    tier_1: list[StrictStr] = Field(default_factory=list)
    tier_2: list[StrictStr] = Field(default_factory=list)
    tier_3: list[StrictStr] = Field(default_factory=list)
    tier_4: list[StrictStr] = Field(default_factory=list)
    tier_5: list[StrictStr] = Field(default_factory=list)


class RedactionSettingsModel(BaseModel):
    """Pydantic model for the ``[profile.<name>.redaction_config]`` table."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="ignore")

    enabled: StrictBool = False
    exclude_paths: list[StrictStr] = Field(default_factory=list)
    confidence_threshold: StrictStr = ""


class ProfileModel(BaseModel):
    """Pydantic model for validating one ``[profile.<name>]`` table.

    After validation the model is converted to a ``Profile`` dataclass with
    :func:`profile_from_model`. Unknown keys are ignored here; the loader
    reports them separately.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="ignore")

    extends: str | None = None
    output: StrictStr = ""
    format: StrictStr = ""
    max_tokens: StrictInt = 0
    tokenizer: StrictStr = ""
    compression: StrictBool = False
    redaction: StrictBool = False
    target: StrictStr = ""
    ignore: list[StrictStr] = Field(default_factory=list)
    include: list[StrictStr] = Field(default_factory=list)
    priority_files: list[StrictStr] = Field(default_factory=list)
    relevance: TierSetModel = Field(default_factory=TierSetModel)
    redaction_config: RedactionSettingsModel = Field(default_factory=RedactionSettingsModel)

    @field_validator("extends", mode="before")
    @classmethod
    def _strip_extends(cls, value: object) -> str | None:
        if value is None:
            return None
        if isinstance(value, str):
            stripped = value.strip()
            return stripped or None
        msg = "extends"
        raise ConfigFieldTypeError(msg, "a string")


class ConfigModel(BaseModel):
    """Pydantic model for a whole harvx TOML document.

    Attributes:
        profile: Profile tables keyed by profile name.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="ignore")

    profile: dict[str, ProfileModel] = Field(default_factory=dict)


def profile_from_model(model: ProfileModel) -> Profile:
    """Convert a validated ``ProfileModel`` into a runtime ``Profile``.

    Args:
        model: The validated model from TOML parsing.

    Returns:
        A ``Profile`` owning fresh copies of every collection.
    """
    payload = model.model_dump(mode="python")
    relevance = payload["relevance"]
    redaction_config = payload["redaction_config"]
    extends = payload.get("extends")
    return Profile(
        output=payload["output"],
        format=payload["format"],
        max_tokens=int(payload["max_tokens"]),
        tokenizer=payload["tokenizer"],
        compression=payload["compression"],
        redaction=payload["redaction"],
        target=payload["target"],
        ignore=list(payload["ignore"]),
        include=list(payload["include"]),
        priority_files=list(payload["priority_files"]),
        relevance=TierSet(**{name: list(values) for name, values in relevance.items()}),
        redaction_config=RedactionSettings(
            enabled=redaction_config["enabled"],
            exclude_paths=list(redaction_config["exclude_paths"]),
            confidence_threshold=redaction_config["confidence_threshold"],
        ),
        extends=ProfileName(extends) if extends else None,
    )


__all__ = [
    "ConfigFieldTypeError",
    "ConfigFileNotFoundError",
    "ConfigModel",
    "ConfigValidationError",
    "InvalidConfigFileError",
    "MalformedConfigError",
    "Profile",
    "ProfileCycleError",
    "ProfileModel",
    "ProfileNotFoundError",
    "RedactionSettings",
    "RedactionSettingsModel",
    "TierSet",
    "TierSetModel",
    "UnknownFieldKeyError",
    "UnknownTargetPresetError",
    "profile_from_model",
]
