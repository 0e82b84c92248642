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

"""The ``HARVX_*`` environment layer.

Only a fixed set of variables is consulted; there is no generic prefix
scanning. Empty values are treated as unset, and values that do not parse for
their field are dropped with a debug record instead of failing the resolve.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Final

from harvx._internal.logging_utils import structured_extra
from harvx.core.model_types import ConfigSource, FieldKind, LogComponent

from .constants import DEFAULT_PROFILE_NAME
from .fields import FieldKey

logger: logging.Logger = logging.getLogger("harvx.config.environment")

PROFILE_ENV: Final[str] = "HARVX_PROFILE"
FORMAT_ENV: Final[str] = "HARVX_FORMAT"
MAX_TOKENS_ENV: Final[str] = "HARVX_MAX_TOKENS"
TOKENIZER_ENV: Final[str] = "HARVX_TOKENIZER"
OUTPUT_ENV: Final[str] = "HARVX_OUTPUT"
TARGET_ENV: Final[str] = "HARVX_TARGET"
COMPRESS_ENV: Final[str] = "HARVX_COMPRESS"
REDACT_ENV: Final[str] = "HARVX_REDACT"

ENV_FIELDS: Final[Mapping[str, FieldKey]] = {
    FORMAT_ENV: FieldKey.FORMAT,
    MAX_TOKENS_ENV: FieldKey.MAX_TOKENS,
    TOKENIZER_ENV: FieldKey.TOKENIZER,
    OUTPUT_ENV: FieldKey.OUTPUT,
    TARGET_ENV: FieldKey.TARGET,
    COMPRESS_ENV: FieldKey.COMPRESSION,
    REDACT_ENV: FieldKey.REDACTION,
}

_TRUE_VALUES: Final[frozenset[str]] = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES: Final[frozenset[str]] = frozenset({"0", "f", "F", "FALSE", "false", "False"})
_INT_PATTERN: Final[re.Pattern[str]] = re.compile(r"[+-]?[0-9]+")
_INT_MIN: Final[int] = -(2**63)
_INT_MAX: Final[int] = 2**63 - 1


def parse_env_bool(raw: str) -> bool | None:
    """Parse a boolean environment value.

    Accepts ``1 t T TRUE true True`` and ``0 f F FALSE false False``.

    Returns:
        The parsed boolean, or ``None`` when ``raw`` is not recognised.
    """
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    return None


def parse_env_int(raw: str) -> int | None:
    """Parse a signed 64-bit decimal integer, or return ``None``."""
    if _INT_PATTERN.fullmatch(raw) is None:
        return None
    value = int(raw)
    if not _INT_MIN <= value <= _INT_MAX:
        return None
    return value


def _parse_env_value(key: FieldKey, raw: str) -> object | None:
    match key.kind:
        case FieldKind.INTEGER:
            return parse_env_int(raw)
        case FieldKind.BOOLEAN:
            return parse_env_bool(raw)
        case FieldKind.STRING:
            return raw
        case FieldKind.COLLECTION:
            return None


def collect_env_layer(environ: Mapping[str, str]) -> dict[FieldKey, object]:
    """Return the profile values supplied through ``HARVX_*`` variables.

    Args:
        environ: Environment mapping to read. Callers inject it explicitly;
            the process environment is never consulted here.

    Returns:
        Flat mapping holding only the variables that were set, non-empty and
        parseable.
    """
    values: dict[FieldKey, object] = {}
    for variable, key in ENV_FIELDS.items():
        raw = environ.get(variable, "")
        if not raw:
            continue
        parsed = _parse_env_value(key, raw)
        if parsed is None:
            logger.debug(
                "Ignoring %s=%r: not a valid %s",
                variable,
                raw,
                key.kind,
                extra=structured_extra(
                    LogComponent.ENVIRONMENT,
                    source=ConfigSource.ENV,
                    details={"variable": variable, "field": key.value},
                ),
            )
            continue
        values[key] = parsed
    return values


def resolve_profile_name(explicit: str | None, environ: Mapping[str, str]) -> str:
    """Return the active profile name.

    Precedence is the explicit argument, then ``HARVX_PROFILE``, then
    ``default``. Empty strings count as unset.
    """
    if explicit:
        return explicit
    selected = environ.get(PROFILE_ENV, "")
    if selected:
        return selected
    return DEFAULT_PROFILE_NAME


__all__ = [
    "COMPRESS_ENV",
    "ENV_FIELDS",
    "FORMAT_ENV",
    "MAX_TOKENS_ENV",
    "OUTPUT_ENV",
    "PROFILE_ENV",
    "REDACT_ENV",
    "TARGET_ENV",
    "TOKENIZER_ENV",
    "collect_env_layer",
    "parse_env_bool",
    "parse_env_int",
    "resolve_profile_name",
]
