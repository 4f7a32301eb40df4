"""
Named, persistent browser profiles.

A profile is a directory under a fixed root holding the browser's own
session state (cookies, local storage). Reusing a profile name reuses
that state; different names never share it. Concurrent runs on the same
profile are not coordinated.
"""

import re
import shutil
from pathlib import Path

from web_reader.core.exceptions import ConfigurationError
from web_reader.utils.logging import get_logger

logger = get_logger(__name__)

_PROFILE_NAME = re.compile(r"^[A-Za-z0-9._-]+$")


def validate_profile_name(name: str) -> str:
    """
    Check that a profile name is safe to use as a directory name.

    Args:
        name: Profile name as given by the caller

    Returns:
        The name, unchanged

    Raises:
        ConfigurationError: If the name is empty, contains path
            separators or other unsafe characters, or is "." / ".."
    """
    if not name or not _PROFILE_NAME.match(name) or name in (".", ".."):
        raise ConfigurationError(
            "Profile name must use only letters, digits, '.', '_' and '-'",
            details={"profile": name},
        )
    return name


class ProfileStore:
    """
    Maps profile names to directories under a root.

    Example:
        >>> store = ProfileStore(Path.home() / ".web-reader" / "profiles")
        >>> profile_dir = store.ensure("work")
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def path_for(self, name: str) -> Path:
        """Directory for a profile (not created)."""
        return self.root / validate_profile_name(name)

    def ensure(self, name: str) -> Path:
        """Create the profile directory if needed and return it."""
        path = self.path_for(name)
        if not path.exists():
            logger.debug(f"Creating profile directory: {path}")
        path.mkdir(parents=True, exist_ok=True)
        return path

    def names(self) -> list[str]:
        """Names of the existing profiles, sorted."""
        if not self.root.is_dir():
            return []
        return sorted(p.name for p in self.root.iterdir() if p.is_dir())

    def remove(self, name: str) -> bool:
        """
        Delete a profile and all its browser state.

        Returns:
            True if a profile was removed, False if it did not exist
        """
        path = self.path_for(name)
        if not path.is_dir():
            return False
        shutil.rmtree(path)
        logger.info(f"Removed profile: {name}")
        return True
