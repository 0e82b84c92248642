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

"""Unit tests for Config Inheritance."""

from __future__ import annotations

import logging

import pytest

from harvx.config.defaults import DEFAULT_MAX_TOKENS, DEFAULT_OUTPUT, default_profile
from harvx.config.inheritance import LookupOrigin, lookup_profile, resolve_profile
from harvx.config.merge import clone_profile
from harvx.config.models import Profile, ProfileCycleError, ProfileNotFoundError
from tests.fixtures.builders import build_profile

pytestmark = pytest.mark.unit


def test_default_resolves_without_any_table() -> None:
    resolution = resolve_profile("default", {})
    assert resolution.chain == ("default",)
    assert resolution.profile == default_profile()
    assert resolution.profile.extends is None


def test_lookup_tags_synthesized_default() -> None:
    assert lookup_profile("default", {}).origin is LookupOrigin.SYNTHESIZED
    table = {"default": build_profile(format="xml")}
    assert lookup_profile("default", table).origin is LookupOrigin.TABLE


def test_profile_without_extends_inherits_default() -> None:
    table = {"work": build_profile(format="xml")}
    resolution = resolve_profile("work", table)
    assert resolution.chain == ("work", "default")
    assert resolution.profile.format == "xml"
    assert resolution.profile.output == DEFAULT_OUTPUT
    assert resolution.profile.max_tokens == DEFAULT_MAX_TOKENS


def test_chain_merges_each_ancestor_beneath_child() -> None:
    table = {
        "default": build_profile(output="team.md"),
        "base": build_profile(extends="default", max_tokens=50_000, ignore=["build"]),
        "finvault": build_profile(extends="base", format="xml"),
    }
    resolution = resolve_profile("finvault", table)
    assert resolution.chain == ("finvault", "base", "default")
    profile = resolution.profile
    assert profile.format == "xml"
    assert profile.max_tokens == 50_000
    assert profile.ignore == ["build"]
    assert profile.output == "team.md"
    assert profile.extends is None


@pytest.mark.parametrize(
    ("table", "start", "expected_cycle"),
    [
        (
            {"a": build_profile(extends="b"), "b": build_profile(extends="a")},
            "a",
            ("a", "b", "a"),
        ),
        (
            {"a": build_profile(extends="b"), "b": build_profile(extends="a")},
            "b",
            ("b", "a", "b"),
        ),
        ({"x": build_profile(extends="x")}, "x", ("x", "x")),
    ],
)
def test_cycles_are_detected(table: dict[str, Profile], start: str, expected_cycle: tuple[str, ...]) -> None:
    with pytest.raises(ProfileCycleError) as excinfo:
        _ = resolve_profile(start, table)
    assert excinfo.value.cycle == expected_cycle
    assert " -> ".join(expected_cycle) in str(excinfo.value)


def test_cycle_through_explicit_default_is_detected() -> None:
    table = {
        "default": build_profile(extends="a"),
        "a": build_profile(extends="default"),
    }
    with pytest.raises(ProfileCycleError, match="default -> a -> default"):
        _ = resolve_profile("default", table)


def test_default_extending_a_root_profile_terminates() -> None:
    table = {
        "default": build_profile(extends="base", output="d.md"),
        "base": build_profile(format="xml"),
    }
    resolution = resolve_profile("default", table)
    assert resolution.chain == ("default", "base")
    assert resolution.profile.format == "xml"
    assert resolution.profile.output == "d.md"


def test_root_profile_extended_by_default_is_a_cycle() -> None:
    table = {
        "default": build_profile(extends="base", output="d.md"),
        "base": build_profile(format="xml"),
    }
    with pytest.raises(ProfileCycleError) as excinfo:
        _ = resolve_profile("base", table)
    assert excinfo.value.cycle == ("base", "default", "base")
    assert str(excinfo.value) == "circular profile inheritance: base -> default -> base"


def test_unrelated_root_profile_follows_default_chain_once() -> None:
    table = {
        "default": build_profile(extends="base", output="d.md"),
        "base": build_profile(format="xml"),
        "other": build_profile(tokenizer="o200k_base"),
    }
    resolution = resolve_profile("other", table)
    assert resolution.chain == ("other", "default", "base")
    assert len(set(resolution.chain)) == len(resolution.chain)
    assert resolution.profile.format == "xml"
    assert resolution.profile.output == "d.md"
    assert resolution.profile.tokenizer == "o200k_base"


def test_missing_profile_raises_with_available_names() -> None:
    table = {"work": build_profile(), "home": build_profile()}
    with pytest.raises(ProfileNotFoundError) as excinfo:
        _ = resolve_profile("nope", table)
    assert excinfo.value.profile == "nope"
    assert excinfo.value.available == ("home", "work")


def test_missing_parent_names_the_child() -> None:
    table = {"child": build_profile(extends="ghost")}
    with pytest.raises(ProfileNotFoundError, match="extended by 'child'") as excinfo:
        _ = resolve_profile("child", table)
    assert excinfo.value.profile == "ghost"
    assert excinfo.value.extended_by == "child"


def test_five_level_chain_fills_unset_fields_transitively() -> None:
    table = {
        "default": build_profile(output="default.md"),
        "mid": build_profile(extends="default", tokenizer="o200k_base"),
        "base": build_profile(extends="mid", max_tokens=64_000),
        "child": build_profile(extends="base", ignore=["dist"]),
        "leaf": build_profile(extends="child", format="xml"),
    }
    resolution = resolve_profile("leaf", table)

    assert resolution.chain == ("leaf", "child", "base", "mid", "default")
    profile = resolution.profile
    assert profile.format == "xml"
    assert profile.ignore == ["dist"]
    assert profile.max_tokens == 64_000
    assert profile.tokenizer == "o200k_base"
    assert profile.output == "default.md"


def test_deep_chain_warns_but_resolves(caplog: pytest.LogCaptureFixture) -> None:
    table = {
        "l1": build_profile(extends="l2", format="xml"),
        "l2": build_profile(extends="l3"),
        "l3": build_profile(extends="l4"),
        "l4": build_profile(extends="l5"),
        "l5": build_profile(max_tokens=10),
    }
    with caplog.at_level(logging.WARNING, logger="harvx.config.inheritance"):
        resolution = resolve_profile("l1", table)

    assert resolution.chain == ("l1", "l2", "l3", "l4", "l5", "default")
    assert resolution.profile.format == "xml"
    assert resolution.profile.max_tokens == 10
    warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert getattr(warnings[0], "depth", None) == 6


def test_short_chain_does_not_warn(caplog: pytest.LogCaptureFixture) -> None:
    table = {"a": build_profile(extends="b"), "b": build_profile()}
    with caplog.at_level(logging.WARNING, logger="harvx.config.inheritance"):
        _ = resolve_profile("a", table)
    assert not caplog.records


def test_resolution_does_not_mutate_table() -> None:
    table = {
        "base": build_profile(ignore=["vendor"]),
        "child": build_profile(extends="base", format="xml"),
    }
    snapshot = {name: clone_profile(profile) for name, profile in table.items()}

    first = resolve_profile("child", table)
    first.profile.ignore.append("mutated")
    second = resolve_profile("child", table)

    assert table == snapshot
    assert second.profile.ignore == ["vendor"]
    assert first.profile.ignore is not second.profile.ignore
