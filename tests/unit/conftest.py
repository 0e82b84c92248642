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

"""Fixtures shared across all unit tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tests.fixtures.builders import ConfigTree

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def config_tree(tmp_path: Path) -> ConfigTree:
    """Provide an empty temporary layout for global and repository configs.

    Returns:
        ConfigTree rooted at ``tmp_path``.
    """
    tree = ConfigTree(tmp_path)
    tree.repo_dir.mkdir(parents=True)
    (tree.repo_dir / ".git").mkdir()
    return tree
