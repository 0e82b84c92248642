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

"""Built-in default profile.

``default_profile`` seeds the lowest-precedence layer and is the implicit
ancestor of every profile that does not declare ``extends``. Each call builds
a fresh instance, so callers may mutate the result freely.
"""

from __future__ import annotations

from typing import Final

from .models import Profile, RedactionSettings, TierSet

DEFAULT_OUTPUT: Final[str] = "harvx-output.md"
DEFAULT_FORMAT: Final[str] = "markdown"
DEFAULT_MAX_TOKENS: Final[int] = 128_000
DEFAULT_TOKENIZER: Final[str] = "cl100k_base"
DEFAULT_CONFIDENCE_THRESHOLD: Final[str] = "high"

DEFAULT_IGNORE: Final[tuple[str, ...]] = (
    "node_modules",
    "dist",
    ".git",
    "coverage",
    "__pycache__",
    ".next",
    "target",
    "vendor",
)

# Tier 0: build and project manifests.
_TIER_0: Final[tuple[str, ...]] = (
    "package.json",
    "tsconfig.json",
    "tsconfig.*.json",
    "Cargo.toml",
    "go.mod",
    "go.sum",
    "Makefile",
    "Dockerfile",
    "docker-compose.yml",
    "docker-compose.yaml",
    "*.config.*",
    "pyproject.toml",
    "setup.py",
    "setup.cfg",
    "pom.xml",
    "build.gradle",
    "build.gradle.kts",
)
# Tier 1: primary source directories.
_TIER_1: Final[tuple[str, ...]] = (
    "src/**",
    "lib/**",
    "app/**",
    "cmd/**",
    "internal/**",
    "pkg/**",
)
# Tier 2: secondary sources.
_TIER_2: Final[tuple[str, ...]] = (
    "components/**",
    "hooks/**",
    "utils/**",
    "helpers/**",
    "middleware/**",
    "services/**",
    "models/**",
    "types/**",
)
# Tier 3: tests.
_TIER_3: Final[tuple[str, ...]] = (
    "**/*_test.go",
    "**/*.test.ts",
    "**/*.test.tsx",
    "**/*.test.js",
    "**/*.spec.ts",
    "**/*.spec.tsx",
    "**/*.spec.js",
    "**/__tests__/**",
    "**/*_test.py",
    "**/tests/**",
)
# Tier 4: documentation.
_TIER_4: Final[tuple[str, ...]] = (
    "**/*.md",
    "docs/**",
    "README*",
    "CHANGELOG*",
    "CONTRIBUTING*",
    "LICENSE*",
)
# Tier 5: CI configuration and lock files.
_TIER_5: Final[tuple[str, ...]] = (
    ".github/**",
    ".gitlab-ci.yml",
    ".gitlab/**",
    "**/*.lock",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "Cargo.lock",
)


def default_tier_set() -> TierSet:
    """Return the built-in relevance tiers.

    Returns:
        A new ``TierSet`` whose lists are owned by the caller.
    """
    return TierSet(
        tier_0=list(_TIER_0),
        tier_1=list(_TIER_1),
        tier_2=list(_TIER_2),
        tier_3=list(_TIER_3),
        tier_4=list(_TIER_4),
        tier_5=list(_TIER_5),
    )


def default_profile() -> Profile:
    """Return the built-in default profile.

    Returns:
        A new ``Profile`` populated with the built-in defaults.
    """
    return Profile(
        output=DEFAULT_OUTPUT,
        format=DEFAULT_FORMAT,
        max_tokens=DEFAULT_MAX_TOKENS,
        tokenizer=DEFAULT_TOKENIZER,
        compression=False,
        redaction=True,
        target="",
        ignore=list(DEFAULT_IGNORE),
        relevance=default_tier_set(),
        redaction_config=RedactionSettings(
            enabled=True,
            confidence_threshold=DEFAULT_CONFIDENCE_THRESHOLD,
        ),
    )


__all__ = [
    "DEFAULT_CONFIDENCE_THRESHOLD",
    "DEFAULT_FORMAT",
    "DEFAULT_IGNORE",
    "DEFAULT_MAX_TOKENS",
    "DEFAULT_OUTPUT",
    "DEFAULT_TOKENIZER",
    "default_profile",
    "default_tier_set",
]
