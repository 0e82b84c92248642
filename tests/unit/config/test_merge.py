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

"""Unit tests for Config Merge."""

from __future__ import annotations

import pytest

from harvx.config.defaults import default_profile
from harvx.config.merge import (
    clone_profile,
    merge_bool,
    merge_collection,
    merge_field_value,
    merge_int,
    merge_profile,
    merge_redaction_settings,
    merge_string,
    merge_tier_set,
    overrides_base,
)
from harvx.config.models import RedactionSettings, TierSet
from harvx.core.model_types import FieldKind
from tests.fixtures.builders import build_profile

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("base", "override", "expected"),
    [
        ("markdown", "xml", "xml"),
        ("markdown", "", "markdown"),
        ("", "", ""),
    ],
)
def test_merge_string_prefers_non_empty_override(base: str, override: str, expected: str) -> None:
    assert merge_string(base, override) == expected


@pytest.mark.parametrize(
    ("base", "override", "expected"),
    [
        (128_000, 200_000, 200_000),
        (128_000, 0, 128_000),
        (128_000, -1, -1),
    ],
)
def test_merge_int_treats_zero_as_unset(base: int, override: int, expected: int) -> None:
    assert merge_int(base, override) == expected


@pytest.mark.parametrize(("base", "override"), [(True, False), (False, True), (True, True), (False, False)])
def test_merge_bool_always_takes_override(base: bool, override: bool) -> None:  # noqa: FBT001
    assert merge_bool(base, override) is override


def test_merge_collection_replaces_wholesale() -> None:
    assert merge_collection(["a", "b"], ["c"]) == ["c"]


def test_merge_collection_keeps_base_when_override_empty() -> None:
    base = ["a", "b"]
    merged = merge_collection(base, [])
    assert merged == base
    assert merged is not base


def test_merge_collection_never_shares_override_storage() -> None:
    override = ["x"]
    merged = merge_collection([], override)
    merged.append("y")
    assert override == ["x"]


def test_merge_tier_set_merges_each_tier_independently() -> None:
    base = TierSet(tier_0=["a"], tier_1=["b"], tier_5=["z"])
    override = TierSet(tier_1=["c"])
    merged = merge_tier_set(base, override)
    assert merged.tier_0 == ["a"]
    assert merged.tier_1 == ["c"]
    assert merged.tier_5 == ["z"]
    assert merged.tier_0 is not base.tier_0


def test_merge_redaction_settings_rules() -> None:
    base = RedactionSettings(enabled=True, exclude_paths=["secrets/**"], confidence_threshold="high")
    override = RedactionSettings(enabled=False, exclude_paths=[], confidence_threshold="")
    merged = merge_redaction_settings(base, override)
    assert merged.enabled is False
    assert merged.exclude_paths == ["secrets/**"]
    assert merged.confidence_threshold == "high"


def test_merge_profile_child_wins_and_clears_extends() -> None:
    base = default_profile()
    child = build_profile(extends="default", format="xml", max_tokens=0, ignore=["build"])
    merged = merge_profile(base, child)

    assert merged.format == "xml"
    assert merged.max_tokens == base.max_tokens
    assert merged.ignore == ["build"]
    assert merged.output == base.output
    assert merged.extends is None


def test_merge_profile_does_not_mutate_inputs() -> None:
    base = default_profile()
    child = build_profile(format="xml", ignore=["build"])
    before_base = clone_profile(base)
    before_child = clone_profile(child)

    merged = merge_profile(base, child)
    merged.ignore.append("mutated")
    merged.relevance.tier_0.append("mutated")

    assert base == before_base
    assert child == before_child


def test_merge_profile_boolean_false_overrides_true() -> None:
    base = build_profile(redaction=True, compression=True)
    merged = merge_profile(base, build_profile())
    assert merged.redaction is False
    assert merged.compression is False


@pytest.mark.parametrize(
    ("kind", "base", "override", "expected"),
    [
        (FieldKind.STRING, "a", "", "a"),
        (FieldKind.INTEGER, 5, 7, 7),
        (FieldKind.BOOLEAN, True, False, False),
        (FieldKind.COLLECTION, ["a"], ["b"], ["b"]),
    ],
)
def test_merge_field_value_dispatches_by_kind(
    kind: FieldKind,
    base: object,
    override: object,
    expected: object,
) -> None:
    assert merge_field_value(kind, base, override) == expected


@pytest.mark.parametrize(
    ("kind", "override", "expected"),
    [
        (FieldKind.STRING, "", False),
        (FieldKind.STRING, "x", True),
        (FieldKind.INTEGER, 0, False),
        (FieldKind.INTEGER, 3, True),
        (FieldKind.BOOLEAN, False, True),
        (FieldKind.COLLECTION, [], False),
        (FieldKind.COLLECTION, ["a"], True),
    ],
)
def test_overrides_base_matches_merge_rules(kind: FieldKind, override: object, expected: bool) -> None:  # noqa: FBT001
    assert overrides_base(kind, override) is expected


def test_clone_profile_is_deep() -> None:
    original = default_profile()
    copy = clone_profile(original)
    assert copy == original
    copy.relevance.tier_1.append("extra/**")
    copy.redaction_config.exclude_paths.append("x")
    assert "extra/**" not in original.relevance.tier_1
    assert original.redaction_config.exclude_paths == []
