"""Pytest configuration to ensure the redash package is importable."""
from __future__ import annotations

import sys
from pathlib import Path

_REPO_ROOT = Path(__file__).resolve().parents[1]
for _path in (_REPO_ROOT, _REPO_ROOT / "src"):
    _path_str = str(_path)
    if _path_str not in sys.path:
        sys.path.insert(0, _path_str)

import sitecustomize  # noqa: F401,E402  # Ensure src/ is on sys.path via sitecustomize hook.
