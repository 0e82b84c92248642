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

"""Shared Hypothesis strategies for property-based tests."""

from __future__ import annotations

from hypothesis import strategies as st

from harvx.config.models import Profile, RedactionSettings, TierSet
from harvx.core.type_aliases import ProfileName

__all__ = [
    "environment_values",
    "glob_lists",
    "profile_names",
    "profiles",
    "redaction_settings",
    "scalar_strings",
    "tier_sets",
]


def scalar_strings(max_size: int = 12) -> st.SearchStrategy[str]:
    """Return a strategy for string fields, empty strings included."""
    return st.text(alphabet="abcxyz._-", max_size=max_size)


def glob_lists(max_size: int = 4) -> st.SearchStrategy[list[str]]:
    """Return a strategy for collection fields, empty lists included."""
    segment = st.from_regex(r"[a-z0-9_*]{1,8}(/[a-z0-9_*]{1,8}){0,2}", fullmatch=True)
    return st.lists(segment, max_size=max_size)


def tier_sets() -> st.SearchStrategy[TierSet]:
    """Return a strategy for relevance tier sets."""
    return st.builds(
        TierSet,
        tier_0=glob_lists(),
        tier_1=glob_lists(),
        tier_2=glob_lists(),
        tier_3=glob_lists(),
        tier_4=glob_lists(),
        tier_5=glob_lists(),
    )


def redaction_settings() -> st.SearchStrategy[RedactionSettings]:
    """Return a strategy for redaction settings."""
    return st.builds(
        RedactionSettings,
        enabled=st.booleans(),
        exclude_paths=glob_lists(),
        confidence_threshold=st.sampled_from(["", "low", "medium", "high"]),
    )


def profile_names() -> st.SearchStrategy[str]:
    """Return a strategy for short profile names."""
    return st.from_regex(r"[a-z]{1,6}", fullmatch=True)


def profiles() -> st.SearchStrategy[Profile]:
    """Return a strategy for profiles mixing set and unset fields.

    Returns:
        Hypothesis strategy producing ``Profile`` instances with ``extends``
        either unset or naming a short profile.
    """
    return st.builds(
        Profile,
        output=scalar_strings(),
        format=st.sampled_from(["", "markdown", "xml", "plain"]),
        max_tokens=st.one_of(st.just(0), st.integers(min_value=-1_000, max_value=1_000_000)),
        tokenizer=scalar_strings(),
        compression=st.booleans(),
        redaction=st.booleans(),
        target=st.sampled_from(["", "claude", "chatgpt", "generic"]),
        ignore=glob_lists(),
        include=glob_lists(),
        priority_files=glob_lists(),
        relevance=tier_sets(),
        redaction_config=redaction_settings(),
        extends=st.one_of(st.none(), profile_names().map(ProfileName)),
    )


def environment_values() -> st.SearchStrategy[str]:
    """Return arbitrary environment-variable strings."""
    return st.text(max_size=24)
