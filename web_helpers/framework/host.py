"""
Host descriptor used to build absolute URLs for path navigation.

Swapping the host lets the same tests run against different environments
without touching test code.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Host:
    """
    Bare host name with no protocol, trailing slash or path.

    The value is not validated.
    """

    name: str

    # Only plain HTTP is supported for now.
    PROTOCOL = "http://"

    def construct_url(self, path: str) -> str:
        """Return protocol + host + path, e.g. http://example.com/login."""
        return f"{self.PROTOCOL}{self.name}{path}"

    def __str__(self) -> str:
        return self.name


__all__ = ["Host"]
