"""Version information for git-branchdates."""

try:
    from git_branchdates._version import __version__
except ImportError:
    # Fallback for development without tags or when running from source
    __version__ = "0.0.0+unknown"
