"""
Progress events for bulk refresh runs.

The orchestrator writes to a ProgressChannel and the caller drains it,
typically from another thread. Cancellation is cooperative: the
orchestrator checks the token between cities only.
"""
import json
import queue
import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional


@dataclass(frozen=True)
class ProgressEvent:
    name: str
    data: Dict[str, Any]

    def to_sse(self) -> str:
        """Server-Sent Events frame: "event: <name>\\ndata: <json>\\n\\n"."""
        return f"event: {self.name}\ndata: {json.dumps(self.data, default=str)}\n\n"


_CLOSED = object()


class ProgressChannel:
    """Single-producer, single-consumer event channel."""

    def __init__(self):
        self._queue: "queue.Queue[Any]" = queue.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def emit(self, name: str, data: Dict[str, Any]) -> None:
        if self._closed:
            raise RuntimeError("emit on a closed progress channel")
        self._queue.put(ProgressEvent(name, data))

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put(_CLOSED)

    def drain(self, timeout: Optional[float] = None) -> Iterator[ProgressEvent]:
        """
        Yield events until the channel is closed.

        Raises:
            queue.Empty: if no event arrives within ``timeout`` seconds
        """
        while True:
            item = self._queue.get(timeout=timeout)
            if item is _CLOSED:
                return
            yield item

    def events(self) -> List[ProgressEvent]:
        """Everything emitted so far, for an already-closed channel."""
        return list(self.drain(timeout=0))


class CancellationToken:
    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()
