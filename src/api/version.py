"""Version of the installed API package."""

from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION_NAME = "external-brain-reminders"

try:
    API_VERSION = version(DISTRIBUTION_NAME)
except PackageNotFoundError:
    # Running from a source checkout that was never installed
    API_VERSION = "0.0.0+unknown"
