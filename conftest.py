"""Pytest configuration for ensuring local package imports."""
from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent


def _ensure_on_syspath() -> None:
    # src/ for the cityforge package, the root for main.py
    for path in (ROOT / "src", ROOT):
        path_str = str(path)
        if path_str not in sys.path:
            sys.path.insert(0, path_str)


_ensure_on_syspath()
