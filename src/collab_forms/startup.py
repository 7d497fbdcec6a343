"""Centralized initialization for collab_forms entry points.

Loads a .env file from the project root once per process, so settings such
as COLLAB_FORMS_CONFIG can be provided per checkout.
"""

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Module-level state
_initialized: bool = False
_project_root: Optional[Path] = None


def _find_project_root(start_path: Optional[Path] = None) -> Path:
    """Find project root by looking for pyproject.toml, else the working directory."""
    current = (start_path or Path.cwd()).resolve()
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            return parent
    return current


def ensure_initialized(start_path: Optional[Path] = None) -> Path:
    """Load .env once (idempotent).

    Returns:
        The project root directory.
    """
    global _initialized, _project_root

    if _initialized and _project_root is not None:
        return _project_root

    project_root = _find_project_root(start_path)
    env_path = project_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)
        logger.debug(f"Loaded .env from {env_path}")

    _project_root = project_root
    _initialized = True
    return project_root
