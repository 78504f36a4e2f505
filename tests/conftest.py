import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'zcc' and tests/ importable for 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from helpers.cache_utils import reset_zcc_caches

# zcc environment variables that must never leak in from a developer shell.
_LEAK_PRONE_ENV_PREFIX = "ZCC_"


@pytest.fixture(autouse=True)
def _isolate_zcc_state(tmp_path_factory, monkeypatch):
    """Fresh caches, no ZCC_* overrides and a throwaway HOME for every test."""
    for key in [k for k in os.environ if k.startswith(_LEAK_PRONE_ENV_PREFIX)]:
        monkeypatch.delenv(key, raising=False)
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    reset_zcc_caches()
    yield
    reset_zcc_caches()


@pytest.fixture
def isolated_project_env(tmp_path, monkeypatch):
    """
    Isolated project environment for tests.

    The project root is ``tmp_path/project`` (exported as ZCC_PROJECT_ROOT
    and used as the working directory); nothing is written outside tmp_path.
    """
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.setenv("ZCC_PROJECT_ROOT", str(project))
    monkeypatch.chdir(project)
    reset_zcc_caches()
    return project


@pytest.fixture
def packs_root(tmp_path):
    """Empty directory to act as a local pack source root."""
    root = tmp_path / "packs"
    root.mkdir()
    return root
