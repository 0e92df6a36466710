"""release-manager: version bumps and release publishing."""

__version__ = "0.4.0"
