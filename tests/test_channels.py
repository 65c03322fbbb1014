import queue
import threading

import pytest

from conftest import make_bar
from nexow.domain.errors import ChannelClosed
from nexow.engine.channels import control_channel, event_channel
from nexow.engine.events import BarEvent, DoneEvent


def test_events_arrive_in_send_order():
    tx, rx = event_channel()
    sent = [BarEvent(make_bar(100.0 + i, ts=i)) for i in range(5)] + [DoneEvent()]
    for e in sent:
        assert tx.send(e) is True
    tx.close()

    assert list(rx) == sent
    with pytest.raises(ChannelClosed):
        rx.recv()


def test_recv_timeout_raises_empty():
    _, rx = event_channel()

    with pytest.raises(queue.Empty):
        rx.recv(timeout=0.01)


def test_send_after_receiver_closed_is_dropped():
    tx, rx = event_channel()
    rx.close()

    assert tx.send(DoneEvent()) is False


def test_every_concurrent_reader_terminates():
    tx, rx = event_channel()
    got = []
    lock = threading.Lock()

    def reader():
        for e in rx:
            with lock:
                got.append(e)

    readers = [threading.Thread(target=reader) for _ in range(3)]
    for t in readers:
        t.start()
    for i in range(30):
        tx.send(BarEvent(make_bar(1.0, ts=i)))
    tx.close()
    for t in readers:
        t.join(5.0)

    assert not any(t.is_alive() for t in readers)
    assert sorted(e.bar.ts for e in got) == list(range(30))


def test_control_poll_is_non_blocking():
    tx, rx = control_channel()

    assert rx.stop_requested() is False
    tx.stop()
    assert rx.stop_requested() is True
    assert rx.stop_requested() is False
