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

"""Exception hierarchy shared by every harvx component."""

from __future__ import annotations

__all__ = ["HarvxError", "HarvxTypeError", "HarvxValidationError"]


class HarvxError(Exception):
    """Base error for all harvx exceptions."""


class HarvxValidationError(HarvxError, ValueError):
    """Raised when configuration input fails validation checks."""


class HarvxTypeError(HarvxError, TypeError):
    """Raised when configuration input has an unexpected type."""
