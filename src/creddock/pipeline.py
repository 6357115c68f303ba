from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

import click

from creddock.credentials import canonical_credentials_path
from creddock.executor import CommandExecutor


LOGGER = logging.getLogger("creddock")

DEFAULT_ENGINE = "docker"
DEFAULT_CONTAINER_CREDENTIALS_PATH = "/tmp/keys/creds.json"
CREDENTIALS_ENV_VAR = "GOOGLE_APPLICATION_CREDENTIALS"
PROJECT_ENV_VAR = "GOOGLE_CLOUD_PROJECT"


@dataclass(frozen=True)
class InvocationConfig:
    adc: str
    project: str
    context: str
    adc_docker: str = DEFAULT_CONTAINER_CREDENTIALS_PATH
    extra_args: tuple[str, ...] = ()
    engine: str = DEFAULT_ENGINE


def _non_empty_args(args: Iterable[str]) -> list[str]:
    return [str(arg) for arg in args if str(arg) != ""]


def build_command(config: InvocationConfig) -> list[str]:
    return [config.engine, "build", "-q", config.context]


def run_command(config: InvocationConfig, image_id: str, local_creds: str) -> list[str]:
    cmd = [
        config.engine,
        "run",
        "--rm",
        "-e",
        f"{CREDENTIALS_ENV_VAR}={config.adc_docker}",
        "-e",
        f"{PROJECT_ENV_VAR}={config.project}",
        "-v",
        f"{local_creds}:{config.adc_docker}:ro",
        image_id,
    ]
    cmd.extend(_non_empty_args(config.extra_args))
    return cmd


def build_image(executor: CommandExecutor, config: InvocationConfig) -> str:
    """Builds the image in ``config.context`` and returns the id printed by ``build -q``.

    The engine's stderr is echoed verbatim on failure; it is never parsed.
    """
    LOGGER.info("Building image from context %s", config.context)
    result = executor.capture(build_command(config))
    if not result.ok:
        click.echo(result.stderr, err=True)
        raise click.ClickException(f"{config.engine} build failed")
    image_id = result.stdout.strip()
    LOGGER.info("Built image %s", image_id)
    return image_id


def run_image(executor: CommandExecutor, config: InvocationConfig, image_id: str) -> None:
    local_creds = canonical_credentials_path(config.adc)
    click.echo(f"local_creds: {local_creds}")
    mount_source = str(local_creds)
    click.echo(f"mount_source = {mount_source!r}", err=True)

    LOGGER.info("Running image %s with credentials mounted at %s", image_id, config.adc_docker)
    result = executor.stream(run_command(config, image_id, mount_source))
    if not result.ok:
        LOGGER.info("Container exited with status %d", result.returncode)
        raise click.ClickException(f"{config.engine} run failed")
