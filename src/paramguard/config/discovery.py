"""Locating and reading ``paramguard.toml``.

The file is looked up the way git finds ``.git/``: the starting directory
first, then each of its parents. ``PARAMGUARD_CONFIG`` pins one explicit
file and disables the walk.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from paramguard.config.models import GuardConfig

CONFIG_FILENAME = "paramguard.toml"
CONFIG_ENV_VAR = "PARAMGUARD_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file governing *start* (default: cwd), if any.

    A pinned file that does not exist yields None rather than falling
    back to the walk.
    """
    pinned = os.environ.get(CONFIG_ENV_VAR)
    if pinned:
        path = Path(pinned)
        return path if path.is_file() else None

    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_config_table(path: Path) -> dict[str, Any]:
    """Parse *path* as TOML.

    Raises:
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    with path.open("rb") as fh:
        return tomllib.load(fh)


def load_config(path: Path | None = None, cwd: Path | None = None) -> GuardConfig:
    """Validate the sections of *path* (or the discovered file) into a GuardConfig.

    No file at all is a valid configuration: every section keeps its defaults.
    """
    path = path or find_config(cwd)
    if path is None:
        return GuardConfig()
    return GuardConfig.model_validate(read_config_table(path))
