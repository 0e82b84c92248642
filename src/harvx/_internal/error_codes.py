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

"""Stable error code registry used across harvx."""

from __future__ import annotations

from typing import TYPE_CHECKING, NewType

from harvx.config.models import (
    ConfigFieldTypeError,
    ConfigFileNotFoundError,
    ConfigValidationError,
    InvalidConfigFileError,
    MalformedConfigError,
    ProfileCycleError,
    ProfileNotFoundError,
    UnknownFieldKeyError,
    UnknownTargetPresetError,
)

from .exceptions import HarvxError, HarvxTypeError, HarvxValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping

ErrorCode = NewType("ErrorCode", str)

_ERROR_CODES: dict[type[BaseException], ErrorCode] = {
    HarvxError: ErrorCode("HX000"),
    HarvxValidationError: ErrorCode("HX100"),
    HarvxTypeError: ErrorCode("HX101"),
    ConfigValidationError: ErrorCode("HX110"),
    ConfigFieldTypeError: ErrorCode("HX111"),
    UnknownFieldKeyError: ErrorCode("HX112"),
    MalformedConfigError: ErrorCode("HX113"),
    InvalidConfigFileError: ErrorCode("HX114"),
    ConfigFileNotFoundError: ErrorCode("HX115"),
    ProfileNotFoundError: ErrorCode("HX120"),
    ProfileCycleError: ErrorCode("HX121"),
    UnknownTargetPresetError: ErrorCode("HX130"),
}


def error_code_for(exc: BaseException) -> ErrorCode:
    """Return a stable error code for a structured harvx exception.

    Args:
        exc: Exception instance raised by harvx code paths.

    Returns:
        Error code mapped from the exception's class hierarchy.
    """
    for cls in type(exc).__mro__:
        code = _ERROR_CODES.get(cls)
        if code:
            return code
    return ErrorCode("HX000")


def error_code_catalog() -> Mapping[str, ErrorCode]:
    """Return fully-qualified exception names mapped to their error codes.

    Returns:
        Mapping of ``<module>.<ExceptionName>`` strings to error codes.
    """
    return {f"{exc_type.__module__}.{exc_type.__name__}": code for exc_type, code in _ERROR_CODES.items()}


__all__ = ["ErrorCode", "error_code_catalog", "error_code_for"]
