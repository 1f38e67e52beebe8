"""Build version lookup."""

from importlib import metadata

PACKAGE_NAME = "valet"


def get_build_version() -> str:
    """Return the installed package version, or ``development``."""
    try:
        version = metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        return "development"
    return version or "development"
