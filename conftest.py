import sys
from pathlib import Path

import pytest

# Ensure 'src' directory is on sys.path for tests run from a checkout
PROJECT_ROOT = Path(__file__).resolve().parent
SRC_DIR = PROJECT_ROOT / 'src'
if SRC_DIR.exists() and str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


@pytest.fixture
def ini_files(tmp_path):
    """Return ``(main, defaults)`` paths inside a fresh temporary directory."""
    return tmp_path / "app.ini", tmp_path / "app-defaults.ini"
