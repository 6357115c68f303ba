from __future__ import annotations

import logging
import os
import shutil
import sys

import click

from creddock.credentials import default_credentials_path, host_os_family
from creddock.executor import CommandExecutor, SubprocessExecutor
from creddock.pipeline import (
    DEFAULT_CONTAINER_CREDENTIALS_PATH,
    DEFAULT_ENGINE,
    InvocationConfig,
    build_image,
    run_image,
)


VERSION = "0.1.0"
LOG_LEVELS = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}
LOG_LEVEL_CHOICES = tuple(LOG_LEVELS)
DEFAULT_LOG_LEVEL = "warning"

LOGGER = logging.getLogger("creddock")
LOGGER.addHandler(logging.NullHandler())


def _log_level_number(value: str | None) -> int:
    return LOG_LEVELS.get(str(value or "").strip().lower(), LOG_LEVELS[DEFAULT_LOG_LEVEL])


def _configure_logging(level: str | None) -> None:
    stderr_handler = logging.StreamHandler(sys.__stderr__)
    stderr_handler.setFormatter(logging.Formatter("[creddock] %(levelname)s %(message)s"))
    for existing in list(LOGGER.handlers):
        LOGGER.removeHandler(existing)
    LOGGER.addHandler(stderr_handler)
    LOGGER.setLevel(_log_level_number(level))
    LOGGER.propagate = False


def _resolve_adc(adc: str | None) -> str:
    if adc is not None:
        return adc
    default_path = default_credentials_path(host_os_family(), os.environ.get)
    LOGGER.debug("Using default credentials path %s", default_path)
    return str(default_path)


def _require_engine(engine: str) -> None:
    if shutil.which(engine) is None:
        raise click.ClickException(f"{engine} not found")


def _command_executor() -> CommandExecutor:
    return SubprocessExecutor()


@click.command(help="Run docker commands with Google Cloud credentials.")
@click.version_option(VERSION, prog_name="creddock")
@click.option(
    "--adc",
    default=None,
    help="The path to your Google Cloud credentials. Defaults to the default user credentials.",
)
@click.option(
    "--adc-docker",
    default=DEFAULT_CONTAINER_CREDENTIALS_PATH,
    show_default=True,
    help="Path to the credentials file inside the docker container.",
)
@click.option("--project", required=True, help="Google Cloud project name.")
@click.option(
    "-c",
    "--context",
    required=True,
    help="Path to the directory where the Docker image should be built.",
)
@click.option(
    "--args",
    "extra_args",
    multiple=True,
    help=(
        "Argument to pass to the docker run command after the image. Repeat for multiple arguments. "
        "CONTAINER_ARGS given positionally are appended after every --args value."
    ),
)
@click.option(
    "--engine",
    default=DEFAULT_ENGINE,
    show_default=True,
    help="Container engine executable used for build and run.",
)
@click.option(
    "--log-level",
    default=DEFAULT_LOG_LEVEL,
    show_default=True,
    type=click.Choice(LOG_LEVEL_CHOICES, case_sensitive=False),
)
@click.argument("container_args", nargs=-1)
def main(
    adc: str | None,
    adc_docker: str,
    project: str,
    context: str,
    extra_args: tuple[str, ...],
    engine: str,
    log_level: str,
    container_args: tuple[str, ...],
) -> None:
    _configure_logging(log_level)

    config = InvocationConfig(
        adc=_resolve_adc(adc),
        project=project,
        context=context,
        adc_docker=adc_docker,
        extra_args=tuple(extra_args) + tuple(container_args),
        engine=engine,
    )
    _require_engine(config.engine)

    executor = _command_executor()
    image_id = build_image(executor, config)
    run_image(executor, config, image_id)


if __name__ == "__main__":
    main()
