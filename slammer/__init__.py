"""OSC slammer: compose OSC messages and fire them at a cue engine over UDP."""

__version__ = "1.0.0"

from .errors import ConfigError, InvalidAddress, InvalidArgument, SendError, SlammerError
from .message import OscMessage, build, message_from_string
from .dispatcher import DispatchTarget, Dispatcher, pace, send
from .slammer import Slammer

__all__ = [
    "ConfigError",
    "DispatchTarget",
    "Dispatcher",
    "InvalidAddress",
    "InvalidArgument",
    "OscMessage",
    "SendError",
    "Slammer",
    "SlammerError",
    "build",
    "message_from_string",
    "pace",
    "send",
]
