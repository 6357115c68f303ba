from __future__ import annotations

import abc
import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Sequence

import click


LOGGER = logging.getLogger("creddock")


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandExecutor(abc.ABC):
    @abc.abstractmethod
    def capture(self, cmd: Sequence[str]) -> CommandResult:
        """Runs ``cmd`` to completion and returns its exit status with stdout and stderr captured as text."""
        pass

    @abc.abstractmethod
    def stream(self, cmd: Sequence[str]) -> CommandResult:
        """Runs ``cmd`` with the caller's stdio inherited and returns its exit status."""
        pass


def _format_command(cmd: Sequence[str]) -> str:
    return " ".join(shlex.quote(str(part)) for part in cmd)


class SubprocessExecutor(CommandExecutor):
    def capture(self, cmd: Sequence[str]) -> CommandResult:
        LOGGER.debug("Running command (captured): %s", _format_command(cmd))
        try:
            result = subprocess.run(
                [str(part) for part in cmd],
                check=False,
                text=True,
                errors="replace",
                capture_output=True,
            )
        except OSError as exc:
            raise click.ClickException(f"Unable to execute {_format_command(cmd)}: {exc}") from exc
        LOGGER.debug("Command exited with status %d: %s", result.returncode, cmd[0])
        return CommandResult(result.returncode, result.stdout or "", result.stderr or "")

    def stream(self, cmd: Sequence[str]) -> CommandResult:
        LOGGER.debug("Running command (streamed): %s", _format_command(cmd))
        try:
            result = subprocess.run([str(part) for part in cmd], check=False)
        except OSError as exc:
            raise click.ClickException(f"Unable to execute {_format_command(cmd)}: {exc}") from exc
        LOGGER.debug("Command exited with status %d: %s", result.returncode, cmd[0])
        return CommandResult(result.returncode)
