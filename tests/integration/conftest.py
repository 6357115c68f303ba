from __future__ import annotations

import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Iterator

import pytest

import sys

ROOT = Path(__file__).resolve().parents[2]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def _docker_server_version() -> str | None:
    docker = shutil.which("docker")
    if docker is None:
        return None
    completed = subprocess.run(
        [docker, "version", "--format", "{{.Server.Version}}"],
        check=False,
        capture_output=True,
        text=True,
        errors="replace",
    )
    version = completed.stdout.strip()
    if completed.returncode != 0 or not version:
        return None
    return version


@pytest.fixture(scope="session")
def docker_server_version() -> str:
    version = _docker_server_version()
    if version is None:
        pytest.skip("docker daemon is not reachable")
    return version


@pytest.fixture()
def integration_tmp_dir() -> Iterator[Path]:
    with tempfile.TemporaryDirectory(prefix="creddock-int-") as tmp:
        yield Path(tmp)
