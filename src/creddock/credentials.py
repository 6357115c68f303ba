from __future__ import annotations

import os
from pathlib import Path, PurePath, PurePosixPath, PureWindowsPath
from typing import Callable

import click


OS_FAMILY_UNIX = "unix"
OS_FAMILY_WINDOWS = "windows"
ADC_FILE_NAME = "application_default_credentials.json"
GCLOUD_CONFIG_DIR_NAME = "gcloud"


def host_os_family(os_name: str | None = None) -> str:
    name = str(os_name if os_name is not None else os.name).strip().lower()
    if name == "posix":
        return OS_FAMILY_UNIX
    if name == "nt":
        return OS_FAMILY_WINDOWS
    return name


def _required_env(getenv: Callable[[str], str | None], key: str) -> str:
    value = getenv(key)
    if value is None or value == "":
        raise click.ClickException(f"Environment variable {key} is not set; pass --adc explicitly")
    return value


def default_credentials_path(os_family: str, getenv: Callable[[str], str | None]) -> PurePath:
    """Location gcloud writes application default credentials to for ``os_family``.

    ``getenv`` is any ``os.environ.get``-style lookup so callers can supply a
    synthetic environment.
    """
    if os_family == OS_FAMILY_UNIX:
        home = _required_env(getenv, "HOME")
        return PurePosixPath(home) / ".config" / GCLOUD_CONFIG_DIR_NAME / ADC_FILE_NAME
    if os_family == OS_FAMILY_WINDOWS:
        appdata = _required_env(getenv, "APPDATA")
        return PureWindowsPath(appdata) / GCLOUD_CONFIG_DIR_NAME / ADC_FILE_NAME
    raise click.ClickException(f"Unsupported OS: {os_family}")


def canonical_credentials_path(raw_path: str) -> Path:
    if not str(raw_path or "").strip():
        raise click.ClickException("Unable to resolve credentials file: --adc must not be empty")
    try:
        return Path(raw_path).expanduser().resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        raise click.ClickException(f"Unable to resolve credentials file {raw_path}: {exc}") from exc
