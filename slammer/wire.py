# slammer/wire.py
"""
OSC 1.0 binary codec.

Packing and parsing are delegated to python-osc; this module maps between
our immutable ``OscMessage`` and python-osc's packet objects, pinning an
explicit type tag on every argument so ints never turn into floats (or
blobs into strings) on the way out.
"""

from pythonosc.osc_message import OscMessage as OscPacket
from pythonosc.osc_message import ParseError
from pythonosc.osc_message_builder import BuildError, OscMessageBuilder

from .errors import InvalidAddress, InvalidArgument
from .message import OscMessage, osc_type_tag

_BUILDER_TYPES = {
    "s": OscMessageBuilder.ARG_TYPE_STRING,
    "i": OscMessageBuilder.ARG_TYPE_INT,
    "f": OscMessageBuilder.ARG_TYPE_FLOAT,
    "b": OscMessageBuilder.ARG_TYPE_BLOB,
}


def build_packet(msg: OscMessage) -> OscPacket:
    """Return the python-osc packet for msg, as passed to UDPClient.send."""
    builder = OscMessageBuilder(address=msg.address)
    for arg in msg.arguments:
        builder.add_arg(arg, _BUILDER_TYPES[osc_type_tag(arg)])
    try:
        return builder.build()
    except BuildError as e:
        raise InvalidArgument(f"could not encode {msg.address}: {e}") from e


def encode_message(msg: OscMessage) -> bytes:
    """Serialize msg to the OSC binary wire format."""
    return build_packet(msg).dgram


def decode_message(data: bytes) -> OscMessage:
    """Parse one OSC message datagram. Raises InvalidArgument if it is malformed."""
    if not OscPacket.dgram_is_message(data):
        raise InvalidArgument("datagram is not an OSC message")
    try:
        packet = OscPacket(data)
    except ParseError as e:
        raise InvalidArgument(f"malformed OSC message: {e}") from e
    try:
        return OscMessage(packet.address, tuple(packet.params))
    except InvalidAddress as e:
        raise InvalidArgument(f"malformed OSC message: {e}") from e
