"""Version of the Botnorrea API distribution."""

from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION_NAME = "botnorrea-api"

# Reported when running from a checkout that was never installed
UNKNOWN_VERSION = "0.0.0+local"


def get_version() -> str:
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return UNKNOWN_VERSION


__version__ = get_version()
