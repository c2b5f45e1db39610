import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'instructkit' and tests/ importable for 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from instructkit.core.constants import STANDARD_LIBRARY_ENV  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_instructkit_state(monkeypatch):
    """Every test starts without a standard-library override or installed log handler."""
    from instructkit.core.logging_setup import reset_stdlib_logging_for_tests

    monkeypatch.delenv(STANDARD_LIBRARY_ENV, raising=False)
    reset_stdlib_logging_for_tests()
    yield
    reset_stdlib_logging_for_tests()


@pytest.fixture
def isolated_project_env(tmp_path, monkeypatch):
    """
    Isolated project directory for tests.

    The working directory is ``tmp_path`` and the standard library points at
    an empty ``tmp_path/stdlib`` so only modules the test writes are found.
    """
    stdlib = tmp_path / "stdlib"
    stdlib.mkdir()
    monkeypatch.setenv(STANDARD_LIBRARY_ENV, str(stdlib))
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def standard_library(isolated_project_env):
    """The (initially empty) standard library directory of the isolated project."""
    return Path(os.environ[STANDARD_LIBRARY_ENV])
