# nexow/engine/channels.py
from __future__ import annotations

import queue
import threading
from enum import Enum
from typing import Iterator, Optional, Tuple

from nexow.domain.errors import ChannelClosed
from nexow.engine.events import EngineEvent


class EngineControl(Enum):
    STOP = "stop"


_END = object()  # end-of-stream marker, never handed to consumers


class _EventStream:
    def __init__(self) -> None:
        self.q: queue.Queue = queue.Queue()  # unbounded: the producer never waits on a consumer
        self.receiver_closed = threading.Event()


class EventSender:
    """Producer side. send() never blocks and never raises."""

    def __init__(self, stream: _EventStream):
        self._stream = stream

    def send(self, event: EngineEvent) -> bool:
        # nobody listening anymore -> drop
        if self._stream.receiver_closed.is_set():
            return False
        self._stream.q.put_nowait(event)
        return True

    def close(self) -> None:
        self._stream.q.put_nowait(_END)


class EventReceiver:
    """
    Consumer side. Blocks until the next event or end of stream.
    Several threads may read the same receiver; each event goes to exactly one reader
    and the end marker is passed on so that every reader stops.
    """

    def __init__(self, stream: _EventStream):
        self._stream = stream
        self._exhausted = threading.Event()

    def recv(self, timeout: Optional[float] = None) -> EngineEvent:
        if self._exhausted.is_set():
            raise ChannelClosed("event stream closed")
        item = self._stream.q.get(timeout=timeout)  # queue.Empty on timeout
        if item is _END:
            self._exhausted.set()
            self._stream.q.put_nowait(_END)
            raise ChannelClosed("event stream closed")
        return item

    def __iter__(self) -> Iterator[EngineEvent]:
        while True:
            try:
                yield self.recv()
            except ChannelClosed:
                return

    def close(self) -> None:
        """Consumer is gone; the producer drops everything sent afterwards."""
        self._stream.receiver_closed.set()

    @property
    def closed(self) -> bool:
        return self._exhausted.is_set()


class ControlSender:
    def __init__(self, q: queue.Queue):
        self._q = q

    def stop(self) -> None:
        self._q.put_nowait(EngineControl.STOP)


class ControlReceiver:
    def __init__(self, q: queue.Queue):
        self._q = q

    def stop_requested(self) -> bool:
        """Non-blocking poll, checked once at the top of every bar."""
        while True:
            try:
                ctrl = self._q.get_nowait()
            except queue.Empty:
                return False
            if ctrl is EngineControl.STOP:
                return True


def event_channel() -> Tuple[EventSender, EventReceiver]:
    stream = _EventStream()
    return EventSender(stream), EventReceiver(stream)


def control_channel() -> Tuple[ControlSender, ControlReceiver]:
    q: queue.Queue = queue.Queue()
    return ControlSender(q), ControlReceiver(q)
