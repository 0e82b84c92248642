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

"""Profile inheritance resolution.

``resolve_profile`` flattens a profile's ``extends`` chain into a single
profile, merging each ancestor beneath its descendant. The name ``default``
is always resolvable: when no table defines it, the built-in constants stand
in. A profile without ``extends`` implicitly inherits from ``default``.

Cycle detection carries the visited path as an immutable tuple. Two recursive
entry points differ only in the path they pass on:

- ``_resolve_named_parent`` extends the path, so ``a -> b -> a`` is detected;
- ``_resolve_default_base`` starts from an empty path, so the implicit
  ``default`` ancestor is never mistaken for a cycle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from harvx._internal.logging_utils import structured_extra
from harvx.compat import StrEnum
from harvx.core.model_types import LogComponent
from harvx.core.type_aliases import ProfileName

from .constants import DEFAULT_PROFILE_NAME, MAX_INHERITANCE_DEPTH
from .defaults import default_profile
from .merge import merge_profile
from .models import ProfileCycleError, ProfileNotFoundError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .models import Profile

logger: logging.Logger = logging.getLogger("harvx.config.inheritance")


@dataclass(slots=True, frozen=True)
class ProfileResolution:
    """A profile with its inheritance chain flattened.

    Attributes:
        profile: The merged profile; ``extends`` is always ``None``.
        chain: Profile names from the requested profile to its root ancestor,
            e.g. ``("finvault", "base", "default")``.
    """

    profile: Profile
    chain: tuple[ProfileName, ...]


class LookupOrigin(StrEnum):
    """Where a looked-up profile came from."""

    TABLE = "table"
    SYNTHESIZED = "synthesized"


@dataclass(slots=True, frozen=True)
class ProfileLookup:
    """Result of resolving a name to a profile definition."""

    name: ProfileName
    profile: Profile
    origin: LookupOrigin


def lookup_profile(
    name: str,
    profiles: Mapping[str, Profile],
    *,
    extended_by: str | None = None,
) -> ProfileLookup:
    """Find ``name`` in ``profiles``, synthesising the built-in ``default``.

    Args:
        name: Profile name to look up.
        profiles: Table of profile definitions keyed by name.
        extended_by: Child profile that referenced ``name``, for error context.

    Returns:
        The lookup result tagged with its origin.

    Raises:
        ProfileNotFoundError: If ``name`` is not defined and is not ``default``.
    """
    found = profiles.get(name)
    if found is not None:
        return ProfileLookup(ProfileName(name), found, LookupOrigin.TABLE)
    if name == DEFAULT_PROFILE_NAME:
        return ProfileLookup(ProfileName(name), default_profile(), LookupOrigin.SYNTHESIZED)
    raise ProfileNotFoundError(name, available=sorted(profiles), extended_by=extended_by)


def resolve_profile(name: str, profiles: Mapping[str, Profile]) -> ProfileResolution:
    """Resolve ``name`` by following and merging its inheritance chain.

    Child values always win over ancestor values according to the rules in
    :mod:`harvx.config.merge`. Chains longer than three profiles are resolved
    normally but produce a warning suggesting the hierarchy be flattened.
    Neither ``profiles`` nor any profile in it is modified.

    Args:
        name: Profile to resolve.
        profiles: Table of profile definitions keyed by name.

    Returns:
        The flattened profile and its chain.

    Raises:
        ProfileNotFoundError: If ``name`` or one of its ancestors is undefined.
        ProfileCycleError: If the inheritance chain loops back on itself.
    """
    resolution = _resolve(name, profiles, ())
    depth = len(resolution.chain)
    chain_text = " -> ".join(resolution.chain)
    if depth > MAX_INHERITANCE_DEPTH:
        logger.warning(
            "Deep profile inheritance for %s (%s); consider flattening",
            name,
            chain_text,
            extra=structured_extra(
                LogComponent.INHERITANCE,
                profile=name,
                chain=resolution.chain,
                depth=depth,
            ),
        )
    logger.debug(
        "Resolved profile %s via %s",
        name,
        chain_text,
        extra=structured_extra(LogComponent.INHERITANCE, profile=name, chain=resolution.chain),
    )
    return resolution


def _resolve(
    name: str,
    profiles: Mapping[str, Profile],
    path: tuple[str, ...],
    pending_base: str | None = None,
) -> ProfileResolution:
    if name in path:
        raise ProfileCycleError((*path, name))
    if name == pending_base:
        # "default" leads back to the profile whose implicit base it is.
        raise ProfileCycleError((name, *path, name))
    visited = (*path, name)
    lookup = lookup_profile(name, profiles, extended_by=path[-1] if path else None)

    parent = lookup.profile.extends
    if parent:
        return _resolve_named_parent(lookup, parent, profiles, visited, pending_base)
    if lookup.name == DEFAULT_PROFILE_NAME:
        merged = merge_profile(default_profile(), lookup.profile)
        return ProfileResolution(merged, (lookup.name,))
    return _resolve_default_base(lookup, profiles, visited)


def _resolve_named_parent(
    lookup: ProfileLookup,
    parent: str,
    profiles: Mapping[str, Profile],
    visited: tuple[str, ...],
    pending_base: str | None,
) -> ProfileResolution:
    parent_resolution = _resolve(parent, profiles, visited, pending_base)
    merged = merge_profile(parent_resolution.profile, lookup.profile)
    return ProfileResolution(merged, (lookup.name, *parent_resolution.chain))


def _resolve_default_base(
    lookup: ProfileLookup,
    profiles: Mapping[str, Profile],
    visited: tuple[str, ...],
) -> ProfileResolution:
    if DEFAULT_PROFILE_NAME in visited:
        # "default" extends this chain itself; its root sits on the built-in constants.
        merged = merge_profile(default_profile(), lookup.profile)
        return ProfileResolution(merged, (lookup.name,))
    base = _resolve(DEFAULT_PROFILE_NAME, profiles, (), pending_base=lookup.name)
    merged = merge_profile(base.profile, lookup.profile)
    return ProfileResolution(merged, (lookup.name, *base.chain))


__all__ = [
    "LookupOrigin",
    "ProfileLookup",
    "ProfileResolution",
    "lookup_profile",
    "resolve_profile",
]
