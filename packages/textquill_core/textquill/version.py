"""Version information for textquill."""

__version__ = "0.3.0"
__version_info__ = tuple(int(part) for part in __version__.split("."))
