"""
Shared fixtures for the chptmirror test suite.
"""

import shutil
import tempfile
from pathlib import Path

import pytest


def make_checkpoint(tree_size, timestamp, origin="rekor.sigstore.dev - 2605736670972794746", root_hash="abc123"):
    """Build a checkpoint line in the monitors' in-line format."""
    return f"{origin}\\n{tree_size}\\n{root_hash}\\ntimestamp: {timestamp}"


@pytest.fixture
def tmp_dir():
    """Create a temporary working directory for monitor and accepted logs."""
    d = tempfile.mkdtemp(prefix="chptmirror_test_")
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def write_monitor(tmp_dir):
    """Write a monitor log ``logInfo<name>.txt`` containing the given lines."""

    def _write(name, *lines):
        path = tmp_dir / f"logInfo{name}.txt"
        path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
        return path

    return _write
