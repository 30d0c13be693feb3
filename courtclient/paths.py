"""Filesystem helpers and the location of the base content directory."""

from __future__ import annotations

import os
import sys
import time


def file_exists(file_path) -> bool:
    """Return True if ``file_path`` names an existing regular file."""
    if not file_path:
        return False
    return os.path.isfile(file_path)


def dir_exists(dir_path) -> bool:
    """Return True if ``dir_path`` names an existing directory."""
    if not dir_path:
        return False
    return os.path.isdir(dir_path)


def exists(path) -> bool:
    """Return True if anything exists at ``path``."""
    if not path:
        return False
    return os.path.exists(path)


def _application_dir() -> str:
    program = sys.argv[0] if sys.argv and sys.argv[0] else ""
    if not program:
        return os.getcwd()
    return os.path.dirname(os.path.abspath(program))


def get_base_path() -> str:
    """Return the directory holding the game's content, ending with a slash."""
    app_dir = _application_dir()
    if sys.platform == "darwin" and getattr(sys, "frozen", False):
        # Inside an application bundle the content sits next to the bundle.
        return f"{app_dir}/../../../base/"
    return f"{app_dir}/base/"


def delay(milliseconds) -> None:
    """Block for the given number of milliseconds."""
    if milliseconds > 0:
        time.sleep(milliseconds / 1000)