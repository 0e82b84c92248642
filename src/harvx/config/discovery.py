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

"""Location of the global and repository configuration files."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from harvx._internal.logging_utils import structured_extra
from harvx.core.model_types import ConfigSource, LogComponent

from .constants import (
    GLOBAL_CONFIG_DIRNAME,
    GLOBAL_CONFIG_FILENAME,
    MAX_REPO_SEARCH_DEPTH,
    REPO_CONFIG_FILENAME,
    VCS_BOUNDARY_DIRNAME,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

logger: logging.Logger = logging.getLogger("harvx.config.discovery")


def _home_directory(home: Path | None) -> Path | None:
    if home is not None:
        return home
    try:
        return Path.home()
    except RuntimeError:
        return None


def _global_config_dir(environ: Mapping[str, str], *, platform: str, home: Path | None) -> Path | None:
    if platform.startswith("win"):
        app_data = environ.get("APPDATA", "")
        if app_data:
            return Path(app_data)
        base = _home_directory(home)
        return None if base is None else base / "AppData" / "Roaming"
    xdg = environ.get("XDG_CONFIG_HOME", "")
    if xdg:
        return Path(xdg)
    base = _home_directory(home)
    return None if base is None else base / ".config"


def global_config_path(
    environ: Mapping[str, str] | None = None,
    *,
    platform: str = sys.platform,
    home: Path | None = None,
) -> Path | None:
    """Return where the global ``config.toml`` lives for this user.

    On Windows the base directory is ``%APPDATA%`` (falling back to
    ``~/AppData/Roaming``); elsewhere it is ``$XDG_CONFIG_HOME`` (falling back
    to ``~/.config``). The file itself may not exist.

    Args:
        environ: Environment mapping to read. Defaults to ``os.environ``.
        platform: Platform identifier in ``sys.platform`` form.
        home: Home directory override; defaults to ``Path.home()``.

    Returns:
        Path to ``harvx/config.toml`` under the base directory, or ``None``
        when no base directory can be determined.
    """
    env = os.environ if environ is None else environ
    base = _global_config_dir(env, platform=platform, home=home)
    if base is None:
        logger.debug(
            "Unable to determine a global config directory",
            extra=structured_extra(LogComponent.DISCOVERY, source=ConfigSource.GLOBAL),
        )
        return None
    return base / GLOBAL_CONFIG_DIRNAME / GLOBAL_CONFIG_FILENAME


def discover_global_config(
    environ: Mapping[str, str] | None = None,
    *,
    platform: str = sys.platform,
    home: Path | None = None,
) -> Path | None:
    """Return the global config path only when the file exists."""
    path = global_config_path(environ, platform=platform, home=home)
    if path is None or not path.is_file():
        logger.debug(
            "Global config not found",
            extra=structured_extra(LogComponent.DISCOVERY, source=ConfigSource.GLOBAL, path=path),
        )
        return None
    logger.debug(
        "Discovered global config %s",
        path,
        extra=structured_extra(LogComponent.DISCOVERY, source=ConfigSource.GLOBAL, path=path),
    )
    return path


def discover_repo_config(start_dir: Path | str) -> Path | None:
    """Walk upward from ``start_dir`` looking for ``harvx.toml``.

    Symlinks are resolved before walking. The search checks each directory for
    the config file first, then stops if the directory holds ``.git``. It also
    stops at the filesystem root or after twenty levels.

    Args:
        start_dir: Directory to start from.

    Returns:
        Absolute path of the first ``harvx.toml`` found, or ``None``.
    """
    current = Path(start_dir).absolute()
    try:
        current = current.resolve(strict=True)
    except OSError as exc:
        logger.debug(
            "Unable to resolve %s, searching the unresolved path: %s",
            current,
            exc,
            extra=structured_extra(LogComponent.DISCOVERY, source=ConfigSource.REPO, path=current),
        )

    for depth in range(MAX_REPO_SEARCH_DEPTH):
        candidate = current / REPO_CONFIG_FILENAME
        if candidate.exists():
            logger.debug(
                "Discovered repo config %s",
                candidate,
                extra=structured_extra(
                    LogComponent.DISCOVERY,
                    source=ConfigSource.REPO,
                    path=candidate,
                    depth=depth,
                ),
            )
            return candidate
        if (current / VCS_BOUNDARY_DIRNAME).exists():
            logger.debug(
                "Reached %s boundary at %s",
                VCS_BOUNDARY_DIRNAME,
                current,
                extra=structured_extra(LogComponent.DISCOVERY, source=ConfigSource.REPO, path=current, depth=depth),
            )
            return None
        parent = current.parent
        if parent == current:
            return None
        current = parent

    logger.debug(
        "No %s found within %d levels",
        REPO_CONFIG_FILENAME,
        MAX_REPO_SEARCH_DEPTH,
        extra=structured_extra(LogComponent.DISCOVERY, source=ConfigSource.REPO, path=start_dir),
    )
    return None


__all__ = ["discover_global_config", "discover_repo_config", "global_config_path"]
