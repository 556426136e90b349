"""Checks that are performed to configuration options."""

import os
from pathlib import Path


class InvalidConfigurationError(Exception):
    """Reporter configuration is invalid."""


def file_check(path: Path, desc: str) -> None:
    """Check that path is a readable regular file.

    Parameters:
        path (Path): Path to check.
        desc (str): Description of the file used in error messages.

    Raises:
        InvalidConfigurationError: If the path is not a file or is not readable.
    """
    if not os.path.isfile(path):
        raise InvalidConfigurationError(f"{desc} '{path}' is not a file")
    if not os.access(path, os.R_OK):
        raise InvalidConfigurationError(f"{desc} '{path}' is not readable")


def read_secret_file(path: Path, desc: str) -> str:
    """Read a secret value stored in a file, stripping surrounding whitespace.

    Raises:
        InvalidConfigurationError: If the file can not be read or is empty.
    """
    file_check(path, desc)
    with open(path, encoding="utf-8") as fin:
        value = fin.read().strip()
    if not value:
        raise InvalidConfigurationError(f"{desc} '{path}' is empty")
    return value
