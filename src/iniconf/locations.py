"""Locating the main and defaults ini files of an application."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from platformdirs import user_config_dir as _uc

from .config import IniConfig

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "INICONF_CONFIG_DIR"


def main_filename(app_name: str) -> str:
    return f"{app_name.lower()}.ini"


def defaults_filename(app_name: str) -> str:
    return f"{app_name.lower()}-defaults.ini"


def application_dir() -> Path:
    """Return the directory the running program was started from."""
    return Path(sys.argv[0]).resolve().parent if sys.argv and sys.argv[0] else Path.cwd()


def user_config_dir(app_name: str) -> Path:
    env = os.getenv(CONFIG_DIR_ENV)
    if env:
        return Path(env).expanduser().resolve()
    return Path(_uc(appname=app_name)).resolve()


def resolve_ini_location(
    filename: str, app_name: str, *, start_dir: Path | None = None
) -> Path:
    """Return where *filename* should be read from and written to.

    A file sitting next to the application (*start_dir*, by default the
    directory of the running script) wins, which keeps portable installs
    self contained.  Otherwise the per-user configuration directory is used.
    """

    base = Path(start_dir) if start_dir is not None else application_dir()
    local = base / filename
    if local.is_file():
        logger.debug("Using ini file next to the application: %s", local)
        return local.resolve()
    return user_config_dir(app_name) / filename


def config_for(app_name: str, *, start_dir: Path | None = None) -> IniConfig:
    """Return an :class:`IniConfig` over ``<app>.ini`` and ``<app>-defaults.ini``."""

    main = resolve_ini_location(main_filename(app_name), app_name, start_dir=start_dir)
    defaults = resolve_ini_location(
        defaults_filename(app_name), app_name, start_dir=start_dir
    )
    return IniConfig.from_files(main, defaults)
