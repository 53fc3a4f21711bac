"""Collision-resistant stored file names."""

import secrets
from pathlib import PurePath

from beartype import beartype

from app.core.exceptions import EntropySourceFailure

ALPHABET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_+"
RANDOM_NAME_LENGTH = 25


@beartype
def random_string(length: int) -> str:
    """Return ``length`` characters drawn uniformly from ``ALPHABET`` with the OS CSPRNG."""
    if length < 0:
        raise ValueError(f"length must be non-negative, got {length}")
    try:
        return "".join(secrets.choice(ALPHABET) for _ in range(length))
    except (OSError, NotImplementedError) as ex:
        raise EntropySourceFailure(f"Secure random source unavailable: {ex}") from ex


def file_extension(filename: str) -> str:
    """Last suffix of ``filename`` including the leading dot, or ''."""
    return PurePath(filename).suffix


def stored_name_for(original_name: str, rename: bool) -> str:
    """Name a file is stored under.

    Renamed files get a random stem plus the original extension. No check is made
    for an existing file with the same name.
    """
    if not rename:
        return original_name
    return f"{random_string(RANDOM_NAME_LENGTH)}{file_extension(original_name)}"
