# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Backend contract, background position writes and transient status.

"""
Persistence plumbing for the mindmap engine.

The engine never talks to storage directly. Structural calls (branch
create/rename/delete, parent changes) go straight to a :class:`MindmapBackend`.
Position writes are batched per gesture and run on a worker pool; each
write reports a :class:`WriteOutcome` through a thread-safe queue that the
owning session drains on its own thread.

Example:
    queue = PersistenceQueue(backend)
    queue.submit([PositionWrite('idea-1', 10.0, 20.0)])
    queue.flush()
    for outcome in queue.drain():
        ...
"""

import queue
import threading
import time
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Callable, Deque, Dict, List, Optional, Protocol, Sequence, Set, Tuple
import logging

logger = logging.getLogger(__name__)


class MindmapBackend(Protocol):
    """Calls the engine makes into the host application."""

    def update_position(self, node_id: str, x: float, y: float) -> None: ...

    def create_branch(self, name: str, parent_link: Optional[str],
                      color_slot: Optional[int]) -> None: ...

    def rename_branch(self, old: str, new: str) -> None: ...

    def delete_branch(self, name: str) -> None: ...

    def update_parent(self, node_id: str, new_parent_id: Optional[str]) -> None: ...


class BackendUnavailable(RuntimeError):
    """Raised by :class:`InMemoryBackend` when told to fail."""


class InMemoryBackend:
    """
    Backend keeping everything in dicts.

    Used by the CLI and tests. Set ``failing`` (or add ids to
    ``fail_ids``) to make calls raise :class:`BackendUnavailable`.
    """

    def __init__(self):
        self.positions: Dict[str, Tuple[float, float]] = {}
        self.branches: Dict[str, Tuple[Optional[str], Optional[int]]] = {}
        self.parents: Dict[str, Optional[str]] = {}
        self.calls: List[Tuple] = []
        self.failing = False
        self.fail_ids: Set[str] = set()
        self._lock = threading.Lock()

    def _check(self, key: str) -> None:
        if self.failing or key in self.fail_ids:
            raise BackendUnavailable(f"backend refused write for {key!r}")

    def update_position(self, node_id: str, x: float, y: float) -> None:
        with self._lock:
            self.calls.append(('update_position', node_id, x, y))
            self._check(node_id)
            self.positions[node_id] = (x, y)

    def create_branch(self, name: str, parent_link: Optional[str],
                      color_slot: Optional[int]) -> None:
        with self._lock:
            self.calls.append(('create_branch', name, parent_link, color_slot))
            self._check(name)
            self.branches[name] = (parent_link, color_slot)

    def rename_branch(self, old: str, new: str) -> None:
        with self._lock:
            self.calls.append(('rename_branch', old, new))
            self._check(old)
            if old in self.branches:
                self.branches[new] = self.branches.pop(old)

    def delete_branch(self, name: str) -> None:
        with self._lock:
            self.calls.append(('delete_branch', name))
            self._check(name)
            self.branches.pop(name, None)

    def update_parent(self, node_id: str, new_parent_id: Optional[str]) -> None:
        with self._lock:
            self.calls.append(('update_parent', node_id, new_parent_id))
            self._check(node_id)
            self.parents[node_id] = new_parent_id

    def call_names(self) -> List[str]:
        with self._lock:
            return [call[0] for call in self.calls]


@dataclass(frozen=True)
class StatusMessage:
    text: str
    level: str
    posted_at: float


class StatusChannel:
    """Latest transient status message, expiring after ``ttl`` seconds."""

    def __init__(self, ttl: float = 4.0, clock: Callable[[], float] = time.monotonic,
                 history: int = 50):
        self.ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._current: Optional[StatusMessage] = None
        self._history: Deque[StatusMessage] = deque(maxlen=history)

    def post(self, text: str, level: str = 'info') -> StatusMessage:
        message = StatusMessage(text, level, self._clock())
        with self._lock:
            self._current = message
            self._history.append(message)
        return message

    def current(self) -> Optional[StatusMessage]:
        with self._lock:
            message = self._current
            if message is None:
                return None
            if self._clock() - message.posted_at > self.ttl:
                self._current = None
                return None
            return message

    def clear(self) -> None:
        with self._lock:
            self._current = None

    def history(self) -> List[StatusMessage]:
        with self._lock:
            return list(self._history)


@dataclass(frozen=True)
class PositionWrite:
    node_id: str
    x: float
    y: float


@dataclass(frozen=True)
class WriteOutcome:
    """Result of one position write, tagged with its batch sequence number."""
    sequence: int
    node_id: str
    x: float
    y: float
    ok: bool
    error: Optional[str] = None


class PersistenceQueue:
    """Runs batches of position writes on a thread pool."""

    def __init__(self, backend: MindmapBackend, workers: int = 1,
                 status: Optional[StatusChannel] = None):
        self.backend = backend
        self.status = status
        self._executor = ThreadPoolExecutor(max_workers=max(1, workers),
                                            thread_name_prefix='mindmap-persist')
        self._outcomes: 'queue.Queue[WriteOutcome]' = queue.Queue()
        self._pending: Set[Future] = set()
        self._pending_lock = threading.Lock()
        self._sequence = 0

    def submit(self, writes: Sequence[PositionWrite]) -> Optional[Future]:
        """
        Schedule one batch.

        Args:
            writes: Immutable snapshot of the positions to store.

        Returns:
            The batch future, or None for an empty batch.
        """
        batch = tuple(writes)
        if not batch:
            return None
        self._sequence += 1
        future = self._executor.submit(self._run_batch, self._sequence, batch)
        with self._pending_lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)
        logger.debug(f"Queued {len(batch)} position writes (batch {self._sequence})")
        return future

    def _forget(self, future: Future) -> None:
        with self._pending_lock:
            self._pending.discard(future)

    def _run_batch(self, sequence: int, batch: Tuple[PositionWrite, ...]) -> int:
        failures = 0
        for write in batch:
            try:
                self.backend.update_position(write.node_id, write.x, write.y)
            except Exception as e:
                failures += 1
                logger.warning(f"Position write for {write.node_id} failed: {e}")
                self._outcomes.put(WriteOutcome(sequence, write.node_id, write.x,
                                                write.y, False, str(e)))
                continue
            self._outcomes.put(WriteOutcome(sequence, write.node_id, write.x, write.y, True))
        if failures and self.status is not None:
            self.status.post(f"Could not save {failures} position(s); will retry", 'error')
        return failures

    def pending(self) -> int:
        with self._pending_lock:
            return len(self._pending)

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait for every submitted batch. Returns False on timeout."""
        with self._pending_lock:
            futures = list(self._pending)
        if not futures:
            return True
        _, not_done = wait(futures, timeout=timeout)
        return not not_done

    def drain(self) -> List[WriteOutcome]:
        """Outcomes reported since the last drain, in completion order."""
        outcomes: List[WriteOutcome] = []
        while True:
            try:
                outcomes.append(self._outcomes.get_nowait())
            except queue.Empty:
                return outcomes

    def close(self) -> None:
        self._executor.shutdown(wait=True)
