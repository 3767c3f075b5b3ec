"""
Exception types raised by kachina.
"""


class KachinaError(Exception):
    """Base class for all framework errors."""


class ConfigurationError(KachinaError):
    """Invalid or incomplete configuration, detected before connecting."""


class PluginLoadError(KachinaError):
    """A plugin module does not satisfy the plugin contract."""


class ViewOnceError(KachinaError):
    """A quoted message is not (or no longer) a readable view once message."""


class MediaDownloadError(KachinaError):
    """Media could not be downloaded with any strategy."""
