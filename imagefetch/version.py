"""Build and version information for the tool."""

from __future__ import annotations

import platform
import sys
from dataclasses import asdict, dataclass

# Build-time defaults; a release build overwrites these.
GIT_VERSION = "latest"
GIT_COMMIT = ""
FEATURES = ""
BUILD_DATE = "1970-01-01T00:00:00Z"


@dataclass(frozen=True)
class VersionInfo:
    """Versioning information about the running build."""

    git_version: str
    git_commit: str
    build_date: str
    python_version: str
    compiler: str
    platform: str
    features: str

    def __str__(self) -> str:
        return f"{self.git_version}-{self.git_commit}-{self.features}"

    def as_dict(self) -> dict[str, str]:
        """Return the fields as a plain dictionary."""
        return asdict(self)


def get_version() -> VersionInfo:
    """Return the version information of this build."""
    return VersionInfo(
        git_version=GIT_VERSION,
        git_commit=GIT_COMMIT,
        build_date=BUILD_DATE,
        python_version=platform.python_version(),
        compiler=platform.python_implementation(),
        platform=f"{sys.platform}/{platform.machine().lower()}",
        features=FEATURES,
    )