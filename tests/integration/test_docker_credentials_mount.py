from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
SRC = ROOT / "src"

DOCKERFILE = (
    "FROM busybox:latest\n"
    'ENTRYPOINT ["sh", "-c", "echo project=$GOOGLE_CLOUD_PROJECT && cat $GOOGLE_APPLICATION_CREDENTIALS"]\n'
)


def _run_creddock(*args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "-m", "creddock", *args],
        check=False,
        capture_output=True,
        text=True,
        env={**os.environ, "PYTHONPATH": str(SRC)},
    )


@pytest.fixture()
def build_context(integration_tmp_dir: Path) -> Path:
    context = integration_tmp_dir / "app"
    context.mkdir()
    (context / "Dockerfile").write_text(DOCKERFILE, encoding="utf-8")
    return context


@pytest.mark.usefixtures("docker_server_version")
def test_container_sees_mounted_credentials(integration_tmp_dir: Path, build_context: Path) -> None:
    adc = integration_tmp_dir / "adc.json"
    adc.write_text(json.dumps({"type": "authorized_user"}), encoding="utf-8")

    result = _run_creddock("--project", "myproj", "--context", str(build_context), "--adc", str(adc))

    assert result.returncode == 0, result.stderr
    assert "project=myproj" in result.stdout
    assert '"authorized_user"' in result.stdout
    assert f"local_creds: {adc.resolve()}" in result.stdout


@pytest.mark.usefixtures("docker_server_version")
def test_failed_build_exits_one(integration_tmp_dir: Path) -> None:
    empty_context = integration_tmp_dir / "empty"
    empty_context.mkdir()
    adc = integration_tmp_dir / "adc.json"
    adc.write_text("{}", encoding="utf-8")

    result = _run_creddock("--project", "myproj", "--context", str(empty_context), "--adc", str(adc))

    assert result.returncode == 1
    assert "docker build failed" in result.stderr
    assert "local_creds" not in result.stdout
