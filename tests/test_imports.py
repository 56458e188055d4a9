"""Entry points must import cleanly in a fresh interpreter."""

import subprocess
import sys

import pytest


@pytest.mark.parametrize(
    "module",
    ["daybook.cli.main", "daybook.database", "daybook.domain", "daybook.database.sqlalchemy_db"],
)
def test_module_imports_first(module):
    result = subprocess.run(
        [sys.executable, "-c", f"import {module}"],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0, result.stderr
