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

"""Unit tests for Config Loader."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from harvx.config.extract import ConfigDocument
from harvx.config.inheritance import resolve_profile
from harvx.config.loader import find_unknown_keys, load_profiles, load_profiles_with_metadata
from harvx.config.models import InvalidConfigFileError, MalformedConfigError

if TYPE_CHECKING:
    from pathlib import Path

pytestmark = pytest.mark.unit

PROFILES = """
[profile.base]
max_tokens = 50000
ignore = ["vendor"]

[profile.base.relevance]
tier_1 = ["services/**"]

[profile.work]
extends = " base "
format = "xml"

[profile.work.redaction_config]
enabled = true
confidence_threshold = "low"
"""


def test_load_profiles_builds_profile_table() -> None:
    profiles = load_profiles(ConfigDocument("repo", PROFILES))
    assert sorted(profiles) == ["base", "work"]
    work = profiles["work"]
    assert work.extends == "base"
    assert work.format == "xml"
    assert work.redaction_config.enabled is True
    assert work.redaction_config.confidence_threshold == "low"
    assert profiles["base"].relevance.tier_1 == ["services/**"]
    assert profiles["base"].extends is None


def test_loaded_table_feeds_inheritance() -> None:
    resolution = resolve_profile("work", load_profiles(ConfigDocument("repo", PROFILES)))
    assert resolution.chain == ("work", "base", "default")
    assert resolution.profile.max_tokens == 50_000
    assert resolution.profile.ignore == ["vendor"]
    assert resolution.profile.format == "xml"


def test_missing_file_yields_no_profiles(tmp_path: Path) -> None:
    loaded = load_profiles_with_metadata(tmp_path / "absent.toml")
    assert loaded.exists is False
    assert loaded.profiles == {}


def test_unknown_keys_warn_and_are_ignored(caplog: pytest.LogCaptureFixture) -> None:
    text = '[profile.work]\ncolour = "blue"\n[profile.work.relevance]\ntier_9 = []\n'
    with caplog.at_level(logging.WARNING, logger="harvx.config.loader"):
        loaded = load_profiles_with_metadata(ConfigDocument("repo", text))
    assert loaded.unknown_keys == ("profile.work.colour", "profile.work.relevance.tier_9")
    assert "work" in loaded.profiles
    assert any("profile.work.colour" in record.getMessage() for record in caplog.records)


def test_find_unknown_keys_without_profile_table() -> None:
    assert find_unknown_keys({"title": "x"}) == []


@pytest.mark.parametrize(
    "text",
    [
        '[profile.work]\nmax_tokens = "many"\n',
        "[profile.work]\nignore = [1, 2]\n",
        "[profile.work]\nextends = 3\n",
        '[profile]\nwork = "not a table"\n',
    ],
)
def test_invalid_tables_raise_invalid_config_file(text: str) -> None:
    with pytest.raises(InvalidConfigFileError, match="repo.toml"):
        _ = load_profiles(ConfigDocument("repo.toml", text))


def test_malformed_toml_is_reported_before_validation() -> None:
    with pytest.raises(MalformedConfigError):
        _ = load_profiles(ConfigDocument("repo.toml", "[profile.work\n"))
