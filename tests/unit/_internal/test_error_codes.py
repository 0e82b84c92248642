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

"""Unit tests for Internal Error Codes."""

from __future__ import annotations

import re
from pathlib import Path

import pytest

from harvx._internal.error_codes import error_code_catalog, error_code_for
from harvx._internal.exceptions import HarvxError, HarvxTypeError, HarvxValidationError
from harvx.config.models import (
    ConfigFileNotFoundError,
    ConfigValidationError,
    MalformedConfigError,
    ProfileCycleError,
    ProfileNotFoundError,
)

pytestmark = pytest.mark.unit

REPO_ROOT = Path(__file__).resolve().parents[3]


def test_error_code_for_known_hierarchy() -> None:
    assert error_code_for(HarvxError("x")) == "HX000"
    assert error_code_for(HarvxValidationError("x")) == "HX100"
    assert error_code_for(HarvxTypeError("x")) == "HX101"
    assert error_code_for(ConfigValidationError("x")) == "HX110"
    assert error_code_for(MalformedConfigError("repo.toml", "bad", line=1, column=2)) == "HX113"
    assert error_code_for(ConfigFileNotFoundError("team.toml")) == "HX115"
    assert error_code_for(ProfileNotFoundError("work")) == "HX120"
    assert error_code_for(ProfileCycleError(("a", "b", "a"))) == "HX121"


def test_error_code_for_unknown_defaults_to_base() -> None:
    class CustomError(RuntimeError):
        pass

    assert error_code_for(CustomError("x")) == "HX000"


def test_error_code_catalog_uniqueness() -> None:
    catalog = error_code_catalog()
    codes = list(catalog.values())
    assert len(set(codes)) == len(codes)
    assert catalog["harvx._internal.exceptions.HarvxError"] == "HX000"


def test_error_code_documentation_is_in_sync() -> None:
    catalog = error_code_catalog()
    doc_path = REPO_ROOT / "docs" / "EXCEPTIONS.md"
    content = doc_path.read_text(encoding="utf-8")
    documented_codes = set(re.findall(r"HX\d{3}", content))
    registry_codes = set(catalog.values())
    assert registry_codes == documented_codes


def test_exception_hierarchy_keeps_builtin_bases() -> None:
    assert issubclass(ConfigFileNotFoundError, FileNotFoundError)
    assert issubclass(ProfileNotFoundError, LookupError)
    assert issubclass(MalformedConfigError, ValueError)
    assert str(MalformedConfigError("repo.toml", "bad value", line=3, column=7)) == (
        "malformed config repo.toml (line 3, column 7): bad value"
    )
