"""Report the NorskTax package version."""

from __future__ import annotations

import re
from functools import lru_cache
from importlib import metadata
from pathlib import Path
from typing import Final

PACKAGE_NAME: Final = "norsktax"
PYPROJECT_PATH: Final = Path(__file__).resolve().parents[3] / "pyproject.toml"

_PROJECT_TABLE = re.compile(r"^\[project\]\s*$(?P<body>.*?)(?=^\[|\Z)", re.M | re.S)
_VERSION_KEY = re.compile(r'^version\s*=\s*"(?P<version>[^"]+)"', re.M)


@lru_cache(maxsize=1)
def get_project_version() -> str:
    """Return the installed distribution version.

    Source checkouts without an install fall back to ``pyproject.toml``.
    """

    try:
        return metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        return _version_from_pyproject(PYPROJECT_PATH)


def _version_from_pyproject(path: Path) -> str:
    if not path.exists():
        raise RuntimeError(f"Unable to locate project metadata at {path}")

    table = _PROJECT_TABLE.search(path.read_text(encoding="utf-8"))
    match = _VERSION_KEY.search(table.group("body")) if table else None
    if match is None:
        raise RuntimeError(f"No [project] version declared in {path}")
    return match.group("version")


__all__ = ["PACKAGE_NAME", "get_project_version"]
