from __future__ import annotations

from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))
# The package lives under py_modules
sys.path.insert(0, str(ROOT / "py_modules"))


def write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def steam_root(tmp_path: Path) -> Path:
    """An empty but valid Steam install root."""
    root = tmp_path / "Steam"
    (root / "steamapps").mkdir(parents=True)
    return root
