"""
Queue worker base module.

Provides the background thread that drains a queue of events, with
pause/resume/stop control and processing statistics.
"""

import logging
import queue
import threading
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Generic, Optional, TypeVar

from epidown.core.utils.timezone_utils import format_datetime_iso, get_utc_now

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass
class QueueEvent(Generic[T]):
    """
    Queue event data class.

    Attributes:
        event_type: Type identifier for the event.
        payload: Event data.
        queue_id: Unique identifier for the event.
        received_at: UTC timestamp when the event was queued.
        metadata: Optional additional metadata.
    """
    event_type: str
    payload: T
    queue_id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    received_at: datetime = field(default_factory=get_utc_now)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary representation."""
        result = {
            'queue_id': self.queue_id,
            'event_type': self.event_type,
            'received_at_utc': format_datetime_iso(self.received_at),
            'metadata': self.metadata
        }
        if hasattr(self.payload, 'get_display_name'):
            result['display_name'] = self.payload.get_display_name()
        return result


@dataclass
class QueueStats:
    """Processing statistics of a queue worker."""
    total_processed: int = 0
    total_success: int = 0
    total_failed: int = 0

    @property
    def success_rate(self) -> float:
        """Return the success rate as a percentage."""
        if self.total_processed == 0:
            return 0.0
        return (self.total_success / self.total_processed) * 100


class QueueWorker(ABC, Generic[T]):
    """
    Abstract base class for queue workers.

    Events are handled one at a time on a daemon thread. Pausing keeps the
    thread alive but stops taking events; stopping ends the thread and sets
    the stop event, which handlers can pass on as a cancellation signal.

    Subclasses implement ``_handle_event``.
    """

    def __init__(self, name: str, max_failures: int = 5):
        """
        Initialize the queue worker.

        Args:
            name: Worker name for logging.
            max_failures: Consecutive failures before a warning is logged.
        """
        self._name = name
        self._queue: queue.Queue[QueueEvent[T]] = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._pause_event = threading.Event()
        self._current_event: Optional[QueueEvent[T]] = None
        self._processing_started_at: Optional[datetime] = None
        self._consecutive_failures = 0
        self._max_failures = max_failures
        self._lock = threading.Lock()
        self._stats = QueueStats()

    @property
    def name(self) -> str:
        """Return the worker name."""
        return self._name

    @property
    def stop_event(self) -> threading.Event:
        """Return the event that is set when the worker is stopped."""
        return self._stop_event

    def start(self) -> None:
        """Start the worker thread (no-op if it is already running)."""
        if self._thread and self._thread.is_alive():
            logger.debug(f'[{self._name}] 工作线程已在运行')
            return

        self._stop_event.clear()
        self._pause_event.clear()
        self._thread = threading.Thread(target=self._run, daemon=True, name=self._name)
        self._thread.start()
        logger.info(f'🚀 [{self._name}] 队列工作线程已启动')

    def stop(self, timeout: float = 5.0) -> None:
        """
        Stop the worker thread.

        Pending events stay in the queue; ``start()`` picks them up again.
        """
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning(f'⚠️ [{self._name}] 工作线程未能及时停止')
        logger.info(f'🛑 [{self._name}] 队列工作线程已停止')

    def pause(self) -> None:
        """Pause processing; events can still be queued."""
        self._pause_event.set()
        logger.info(f'⏸️ [{self._name}] 队列已暂停')

    def resume(self) -> None:
        """Resume processing after a pause."""
        self._pause_event.clear()
        logger.info(f'▶️ [{self._name}] 队列已恢复')

    def is_paused(self) -> bool:
        """Check if the worker is paused but not stopped."""
        return self._pause_event.is_set() and not self._stop_event.is_set()

    def is_running(self) -> bool:
        """Check if the worker thread is alive and not stopped."""
        return (
            self._thread is not None and
            self._thread.is_alive() and
            not self._stop_event.is_set()
        )

    def qsize(self) -> int:
        """Return the number of pending events."""
        return self._queue.qsize()

    def enqueue(self, event: QueueEvent[T]) -> QueueEvent[T]:
        """Add an event to the queue."""
        self._queue.put(event)
        logger.debug(f'📥 [{self._name}] 事件已入队, 队列长度: {self._queue.qsize()}')
        return event

    def enqueue_event(self, event_type: str, payload: T, **metadata) -> QueueEvent[T]:
        """Create an event and add it to the queue."""
        return self.enqueue(QueueEvent(
            event_type=event_type,
            payload=payload,
            metadata=metadata
        ))

    def process_pending(self) -> int:
        """
        Handle every queued event on the calling thread.

        Used when no worker thread is running (e.g. one-shot CLI runs).

        Returns:
            Number of events handled.
        """
        count = 0
        while not self._stop_event.is_set():
            try:
                event = self._queue.get_nowait()
            except queue.Empty:
                break
            self._process_event(event)
            count += 1
        return count

    def _run(self) -> None:
        """Main worker loop."""
        logger.debug(f'[{self._name}] 工作线程开始运行')

        while not self._stop_event.is_set():
            if self._pause_event.is_set():
                time.sleep(0.5)
                continue

            try:
                event = self._queue.get(timeout=1.0)
            except queue.Empty:
                continue

            self._process_event(event)

        logger.debug(f'[{self._name}] 工作线程退出')

    def _process_event(self, event: QueueEvent[T]) -> None:
        """Handle one event and update statistics."""
        with self._lock:
            self._current_event = event
            self._processing_started_at = get_utc_now()

        try:
            logger.debug(f'🔄 [{self._name}] 处理事件: {event.event_type}')
            self._handle_event(event)
            self._on_success()
        except Exception as e:
            logger.error(f'❌ [{self._name}] 事件处理失败: {e}')
            self._on_failure()
        finally:
            with self._lock:
                self._current_event = None
                self._processing_started_at = None
                self._stats.total_processed += 1

    @abstractmethod
    def _handle_event(self, event: QueueEvent[T]) -> None:
        """
        Handle a queue event.

        Args:
            event: Event to handle.
        """
        pass

    def _on_success(self) -> None:
        """Called when event processing succeeds."""
        with self._lock:
            self._consecutive_failures = 0
            self._stats.total_success += 1

    def _on_failure(self) -> None:
        """Called when event processing fails."""
        with self._lock:
            self._consecutive_failures += 1
            self._stats.total_failed += 1

            if self._consecutive_failures >= self._max_failures:
                logger.warning(
                    f'⚠️ [{self._name}] 连续失败 {self._consecutive_failures} 次 '
                    f'(阈值: {self._max_failures})'
                )

    def get_status(self) -> Dict[str, Any]:
        """
        Get worker status.

        Returns:
            Dictionary with worker state, current event and statistics.
        """
        with self._lock:
            pending_events = [evt.to_dict() for evt in list(self._queue.queue)[:10]]

            current = None
            if self._current_event:
                current = self._current_event.to_dict()
                current['started_at_utc'] = format_datetime_iso(self._processing_started_at)

            return {
                'name': self._name,
                'queue_len': self._queue.qsize(),
                'thread_alive': self._thread.is_alive() if self._thread else False,
                'stopped': self._stop_event.is_set(),
                'paused': self.is_paused(),
                'consecutive_failures': self._consecutive_failures,
                'current_event': current,
                'pending_events': pending_events,
                'stats': {
                    'total_processed': self._stats.total_processed,
                    'total_success': self._stats.total_success,
                    'total_failed': self._stats.total_failed,
                    'success_rate': round(self._stats.success_rate, 2)
                }
            }

    def clear_queue(self) -> int:
        """
        Drop all pending events.

        Returns:
            Number of events removed.
        """
        count = 0
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                break
            count += 1
        logger.info(f'🗑️ [{self._name}] 已清空 {count} 个待处理事件')
        return count
