"""Run every example topic and compare stdout with its ``# =>`` annotations."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]
EXAMPLES_ROOT = REPO_ROOT / "examples"
SRC_ROOT = REPO_ROOT / "src"

EXPECTATION_MARKER = "# =>"


def _example_paths() -> list[Path]:
    return sorted(EXAMPLES_ROOT.glob("ex_*/01_*.py"))


def _expected_stdout(path: Path) -> list[str]:
    """Collect the text after ``# =>`` on each line, in source order."""
    return [
        line.split(EXPECTATION_MARKER, maxsplit=1)[1].strip()
        for line in path.read_text(encoding="utf-8").splitlines()
        if EXPECTATION_MARKER in line
    ]


def test_every_topic_has_an_example() -> None:
    topics = sorted(path for path in EXAMPLES_ROOT.glob("ex_*") if path.is_dir())

    assert topics
    assert [path.parent for path in _example_paths()] == topics


@pytest.mark.parametrize(
    "path",
    [pytest.param(path, id=path.parent.name) for path in _example_paths()],
)
def test_example_stdout_matches_expectations(path: Path) -> None:
    env = {**os.environ, "PYTHONPATH": os.pathsep.join(filter(None, (str(SRC_ROOT), os.environ.get("PYTHONPATH"))))}

    completed = subprocess.run(  # noqa: S603
        [sys.executable, str(path)],
        cwd=path.parent,
        env=env,
        capture_output=True,
        text=True,
        check=False,
    )

    assert completed.returncode == 0, completed.stderr
    assert completed.stderr == ""
    assert completed.stdout.splitlines() == _expected_stdout(path)
