"""Common project-level paths."""

from __future__ import annotations

from pathlib import Path

PACKAGE_ROOT = Path(__file__).resolve().parent
PROJECT_ROOT = PACKAGE_ROOT.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / 'src' / 'common' / 'run_config.toml'

__all__ = ["PACKAGE_ROOT", "PROJECT_ROOT", "DEFAULT_CONFIG_PATH"]
