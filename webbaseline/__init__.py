"""Web platform Baseline feature detection for CSS and JavaScript sources."""

from ._version import __version__

__all__ = ["__version__"]
