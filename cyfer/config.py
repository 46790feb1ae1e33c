"""Front-end configuration: where the vault lives and how logging is set up."""

import logging
import os
import platform
from pathlib import Path
from typing import Optional

APP_DIR_NAME = "cyfer-rs"
VAULT_FILENAME = "vault.json"

# Environment variable that overrides the default vault location
VAULT_PATH_ENV = "CYFER_VAULT_PATH"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_data_dir() -> Path:
    """Get the OS-appropriate per-user data directory."""
    system = platform.system().lower()

    if system == "windows":
        return Path(os.environ.get("APPDATA") or Path.home() / "AppData" / "Roaming")
    if system == "darwin":
        return Path.home() / "Library" / "Application Support"
    return Path(os.environ.get("XDG_DATA_HOME") or Path.home() / ".local" / "share")


def default_vault_path(create_dir: bool = True) -> Path:
    """
    Resolve ``<data-dir>/cyfer-rs/vault.json``.

    Args:
        create_dir: Create the containing directory (mode 0700) if missing

    Returns:
        Path to the default vault file
    """
    directory = get_data_dir() / APP_DIR_NAME
    if create_dir:
        directory.mkdir(mode=0o700, parents=True, exist_ok=True)
    return directory / VAULT_FILENAME


def resolve_vault_path(explicit: Optional[str] = None) -> Path:
    """Pick the vault path: explicit argument, then environment, then default."""
    if explicit:
        return Path(explicit).expanduser()
    from_env = os.environ.get(VAULT_PATH_ENV)
    if from_env:
        return Path(from_env).expanduser()
    return default_vault_path()


def configure_logging(verbose: bool = False) -> None:
    """Send cyfer log records to stderr; DEBUG when verbose, else WARNING."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )
