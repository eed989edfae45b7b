"""Version parsing utilities.

Handles conversion between version strings and semver objects, with
special handling for incomplete version strings (e.g., "1.0" → "1.0.0").
"""

from __future__ import annotations

import semver

FIRST_MAJOR = semver.Version(1, 0, 0)


def parse_version(version_str: str) -> semver.Version:
    """Parse a version string into a semver.Version object.

    Handles incomplete versions by padding with zeros:
    - "1" → "1.0.0"
    - "1.2" → "1.2.0"
    - "1.2.3" → "1.2.3"

    Only the first 3 components are used (major.minor.patch).
    Prerelease/build metadata is not supported.
    """
    parts = version_str.split(".")
    # Pad with zeros to ensure we have at least 3 parts
    while len(parts) < 3:
        parts.append("0")
    return semver.Version.parse(".".join(parts[:3]))


def is_pre_first_major(version_str: str) -> bool:
    """Return True if a major bump would be the package's first major release.

    Examples:
        "0.5.0" → True
        "0.0.1" → True
        "1.0.0" → False
    """
    return parse_version(version_str) < FIRST_MAJOR
