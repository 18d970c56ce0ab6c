"""
Version information for the SCM client.
"""
import importlib.metadata

# Used when running from a source checkout that was never installed
FALLBACK_VERSION = "1.0.0"


def get_version(distribution: str = "scm-client") -> str:
    """Version of the installed distribution, or FALLBACK_VERSION"""
    try:
        return importlib.metadata.version(distribution)
    except importlib.metadata.PackageNotFoundError:
        return FALLBACK_VERSION


__version__ = get_version()
