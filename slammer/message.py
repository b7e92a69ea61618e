# slammer/message.py
"""
OSC message model and the live-text message builder.

An ``OscMessage`` is an address plus an ordered, immutable tuple of typed
arguments. Supported argument types map one-to-one onto the four mandatory
OSC 1.0 types:

    str   -> 's'  (OSC-string)
    int   -> 'i'  (int32)
    float -> 'f'  (float32)
    bytes -> 'b'  (OSC-blob)
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple, Union

from .durations import Duration, format_duration, to_nanoseconds
from .errors import InvalidAddress, InvalidArgument

OscArgument = Union[str, int, float, bytes]

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1
FLOAT32_MAX = 3.4028234663852886e38

# Printable ASCII that may not appear inside an address component.
_ILLEGAL_ADDRESS_CHARS = frozenset(" #,/")

LIVE_TEXT_FORMAT = "{counter} messages and {elapsed} elapsed"


# -------------------- Address rules --------------------

def is_legal_address_component(component: str) -> bool:
    """A component is the text between two slashes: printable ASCII, no space, '#' or ','."""
    if not component:
        return False
    for ch in component:
        if not (0x21 <= ord(ch) <= 0x7E) or ch in _ILLEGAL_ADDRESS_CHARS:
            return False
    return True


def is_legal_address(address: str) -> bool:
    if not isinstance(address, str) or not address.startswith("/"):
        return False
    return all(is_legal_address_component(c) for c in address[1:].split("/"))


def osc_type_tag(arg: OscArgument) -> str:
    """Return the OSC type tag for a Python value, or raise InvalidArgument."""
    # bool is an int subclass; OSC True/False tags are not supported here
    if isinstance(arg, bool):
        raise InvalidArgument(f"unsupported OSC argument type: bool ({arg!r})")
    if isinstance(arg, str):
        return "s"
    if isinstance(arg, int):
        if not INT32_MIN <= arg <= INT32_MAX:
            raise InvalidArgument(f"integer argument out of int32 range: {arg}")
        return "i"
    if isinstance(arg, float):
        if math.isfinite(arg) and abs(arg) > FLOAT32_MAX:
            raise InvalidArgument(f"float argument out of float32 range: {arg!r}")
        return "f"
    if isinstance(arg, (bytes, bytearray)):
        return "b"
    raise InvalidArgument(f"unsupported OSC argument type: {type(arg).__name__} ({arg!r})")


# -------------------- Message --------------------

@dataclass(frozen=True)
class OscMessage:
    """An OSC address with its typed arguments. Validated on construction."""

    address: str
    arguments: Tuple[OscArgument, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not self.address:
            raise InvalidAddress("OSC address must not be empty")
        if not is_legal_address(self.address):
            raise InvalidAddress(f"illegal OSC address: {self.address!r}")

        args = tuple(bytes(a) if isinstance(a, bytearray) else a for a in self.arguments)
        for arg in args:
            osc_type_tag(arg)
        object.__setattr__(self, "arguments", args)

    @property
    def type_tags(self) -> str:
        return "," + "".join(osc_type_tag(a) for a in self.arguments)

    def address_parts(self) -> List[str]:
        """Split the address into its components: '/cue/1/go' -> ['cue', '1', 'go']."""
        return self.address[1:].split("/")

    def __str__(self) -> str:
        if not self.arguments:
            return self.address
        return self.address + " " + " ".join(_render_arg(a) for a in self.arguments)


def _render_arg(arg: OscArgument) -> str:
    if isinstance(arg, str):
        return '"' + arg.replace("\\", "\\\\").replace('"', '\\"') + '"'
    if isinstance(arg, bytes):
        return f"<blob {len(arg)} bytes>"
    return repr(arg)


# -------------------- Builders --------------------

def build(address: str, counter: int, elapsed: Duration) -> OscMessage:
    """
    Build the live-text message for one iteration of the slam loop.

    The message carries a single string argument,
    ``"<counter> messages and <elapsed> elapsed"``, where elapsed is rendered
    with format_duration (``150ms``, ``1.5s``, ``2m3s`` ...).

    Raises InvalidAddress for an empty/illegal address and ValueError for a
    negative counter or elapsed time.
    """
    if not address:
        raise InvalidAddress("OSC address must not be empty")
    if not is_legal_address(address):
        raise InvalidAddress(f"illegal OSC address: {address!r}")
    if isinstance(counter, bool) or not isinstance(counter, int):
        raise TypeError(f"counter must be an int, got {type(counter).__name__}")
    if counter < 0:
        raise ValueError(f"counter must not be negative: {counter}")
    if to_nanoseconds(elapsed) < 0:
        raise ValueError(f"elapsed must not be negative: {elapsed!r}")

    text = LIVE_TEXT_FORMAT.format(counter=counter, elapsed=format_duration(elapsed))
    return OscMessage(address, (text,))


_RE_TOKEN = re.compile(r'\s*(?:"((?:[^"\\]|\\.)*)"|(\S+))')
_RE_INT = re.compile(r"[-+]?\d+")
_RE_FLOAT = re.compile(r"[-+]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][-+]?\d+)?")


def _tokens(text: str) -> Iterable[Tuple[bool, str]]:
    """Yield (quoted, token) pairs."""
    pos = 0
    text = text.rstrip()
    while pos < len(text):
        m = _RE_TOKEN.match(text, pos)
        if m.group(1) is not None:
            yield True, re.sub(r"\\(.)", r"\1", m.group(1))
        else:
            tok = m.group(2)
            if tok.startswith('"'):
                raise InvalidArgument(f"unterminated quoted string in {text!r}")
            yield False, tok
        pos = m.end()


def _convert(token: str) -> OscArgument:
    if _RE_INT.fullmatch(token):
        value = int(token)
        if not INT32_MIN <= value <= INT32_MAX:
            raise InvalidArgument(f"integer argument out of int32 range: {token}")
        return value
    if "." in token and _RE_FLOAT.fullmatch(token):
        return float(token)
    return token


def message_from_string(text: str) -> OscMessage:
    """
    Parse a console-style command into a message.

        /cue/1/name "Opening look" 3 0.5

    The first token is the address. Double-quoted tokens are always strings,
    bare tokens become int, float (when they contain a '.') or string.
    """
    if not text or not text.strip():
        raise InvalidAddress("OSC address must not be empty")

    tokens = list(_tokens(text))
    quoted, address = tokens[0]
    if quoted:
        raise InvalidAddress(f"illegal OSC address: {address!r}")

    args = [tok if q else _convert(tok) for q, tok in tokens[1:]]
    return OscMessage(address, tuple(args))
