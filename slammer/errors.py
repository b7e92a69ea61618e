# slammer/errors.py


class SlammerError(Exception):
    """Base class for everything this package raises on purpose."""


class InvalidAddress(SlammerError, ValueError):
    """The OSC address is empty or not a legal OSC path."""


class InvalidArgument(SlammerError, ValueError):
    """An argument has no OSC type, or a datagram/command could not be parsed."""


class SendError(SlammerError):
    """The destination could not be resolved or the socket reported an I/O error."""


class ConfigError(SlammerError):
    """Configuration value missing or malformed."""
