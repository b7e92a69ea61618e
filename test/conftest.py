import os
import socket
import sys

import pytest

# Add parent directory to sys.path to allow imports from the folder above
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from slammer.dispatcher import DispatchTarget


@pytest.fixture
def receiver():
    """A UDP socket on 127.0.0.1 standing in for the cue console."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    yield sock
    sock.close()


@pytest.fixture
def target(receiver):
    host, port = receiver.getsockname()
    return DispatchTarget(host, port)
