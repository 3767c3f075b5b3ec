"""
Resolve a transport factory from a `module:attribute` import string.
"""

import importlib

from kachina.errors import ConfigurationError
from kachina.transport.base import TransportFactory


def resolve_transport_factory(spec: str) -> TransportFactory:
    """
    Import the factory named by `spec`, e.g. "mybot.transport:create".

    Raises:
        ConfigurationError: if the string is malformed or cannot be imported.
    """
    if not spec or ":" not in spec:
        raise ConfigurationError(
            f"Transport must be given as 'module:attribute', got {spec!r}"
        )
    module_name, _, attr = spec.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import transport module {module_name!r}: {e}") from e

    factory = getattr(module, attr, None)
    if factory is None or not callable(factory):
        raise ConfigurationError(f"{module_name!r} has no callable {attr!r}")
    return factory
