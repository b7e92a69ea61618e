import socket
import time
from datetime import timedelta

import pytest
from pythonosc.udp_client import UDPClient

from slammer import dispatcher as dispatcher_mod
from slammer.dispatcher import DispatchTarget, Dispatcher, pace, send
from slammer.errors import ConfigError, SendError
from slammer.message import OscMessage, build
from slammer.wire import decode_message


class FlakySocket:
    """Wraps a real socket; the first `fails` sendto calls raise OSError."""

    def __init__(self, sock, fails=1, error=None):
        self._sock = sock
        self.fails = fails
        self.error = error or OSError(105, "No buffer space available")

    def sendto(self, data, addr):
        if self.fails:
            self.fails -= 1
            raise self.error
        return self._sock.sendto(data, addr)

    def close(self):
        self._sock.close()


def _recv(receiver):
    data, _ = receiver.recvfrom(65535)
    return decode_message(data)


def test_target_validation():
    assert str(DispatchTarget("localhost", 53000)) == "localhost:53000"
    for host, port in [("", 53000), ("  ", 1), ("localhost", 0), ("localhost", 65536), ("localhost", "53000"), ("localhost", True)]:
        with pytest.raises(ConfigError):
            DispatchTarget(host, port)


def test_target_is_immutable():
    t = DispatchTarget()
    with pytest.raises(AttributeError):
        t.port = 1


def test_send_delivers_one_datagram(receiver, target):
    msg = build("/cue/title/liveText", 3, timedelta(milliseconds=150))
    with Dispatcher(target) as d:
        d.send(msg)
        assert d.sent == 1
    assert _recv(receiver) == msg


def test_client_is_reused_and_released(receiver, target):
    d = Dispatcher(target)
    assert not d.is_open
    d.send(OscMessage("/a", (1,)))
    client = d._client
    d.send(OscMessage("/a", (2,)))
    assert d._client is client
    d.close()
    assert not d.is_open
    d.close()  # idempotent

    assert [_recv(receiver).arguments for _ in range(2)] == [(1,), (2,)]


def test_module_level_send(receiver, target):
    send(target, OscMessage("/one/shot", ("x",)))
    assert _recv(receiver) == OscMessage("/one/shot", ("x",))


def test_unresolvable_host_then_recovery(receiver, target, monkeypatch):
    def no_dns(*args, **kwargs):
        raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")

    d = Dispatcher(target)
    monkeypatch.setattr(socket, "getaddrinfo", no_dns)
    with pytest.raises(SendError) as exc:
        d.send(OscMessage("/cue", ("lost",)))
    assert isinstance(exc.value.__cause__, socket.gaierror)
    assert not d.is_open

    monkeypatch.undo()
    d.send(OscMessage("/cue", ("found",)))
    d.close()
    assert _recv(receiver).arguments == ("found",)


def test_transport_error_is_local_to_one_send(receiver, target):
    with Dispatcher(target) as d:
        d._client._sock = FlakySocket(d._client._sock, fails=1)
        with pytest.raises(SendError):
            d.send(OscMessage("/cue", (1,)))
        d.send(OscMessage("/cue", (2,)))
        assert d.sent == 1
    assert _recv(receiver).arguments == (2,)


def test_pace_zero_does_not_sleep(monkeypatch):
    calls = []
    monkeypatch.setattr(dispatcher_mod.time, "sleep", calls.append)
    pace(0)
    pace(0.0)
    pace(timedelta(0))
    assert calls == []


def test_pace_sleeps_at_least_interval():
    start = time.monotonic()
    pace(0.05)
    assert time.monotonic() - start >= 0.049

    start = time.monotonic()
    Dispatcher(DispatchTarget()).pace(timedelta(milliseconds=20))
    assert time.monotonic() - start >= 0.019


def test_pace_rejects_negative():
    with pytest.raises(ValueError):
        pace(-0.1)


def test_sends_through_python_osc_client(receiver, target):
    with Dispatcher(target) as d:
        d.send(OscMessage("/cue", ("x",)))
        assert isinstance(d._client, UDPClient)
    assert d._client is None


def test_full_socket_buffer_is_a_send_error(receiver, target):
    with Dispatcher(target) as d:
        d.open()
        d._client._sock = FlakySocket(d._client._sock, error=BlockingIOError(11, "Resource temporarily unavailable"))
        with pytest.raises(SendError) as exc:
            d.send(OscMessage("/cue", (1,)))
        assert isinstance(exc.value.__cause__, BlockingIOError)
        d.send(OscMessage("/cue", (2,)))
    assert _recv(receiver).arguments == (2,)
