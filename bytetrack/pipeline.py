"""Base class for frame-processing pipelines with an input queue and worker threads."""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_LENGTH = 16
_PLACEHOLDER_WAIT = 60.0
_IDLE_WAIT = 0.01

ResultCallback = Callable[["PipelineBase", Any, Any], Any]


@dataclass
class Frame:
    """A video frame handed to a pipeline."""

    frame_id: int
    stream_id: int = 0
    width: int = 0
    height: int = 0
    data: Any = None
    user_data: Any = None


class PipelineError(RuntimeError):
    """Raised when a pipeline operation fails."""


class PipelineBase:
    """Frame pipeline: frames go into ``input_queue``; subclasses process them in ``run``.

    ``start`` launches two daemon threads: one calls ``run`` repeatedly, the other
    calls ``result_callback_thread`` repeatedly once a result callback is registered.
    """

    def __init__(self, queue_length: int = DEFAULT_QUEUE_LENGTH) -> None:
        self.input_queue: queue.Queue[Frame] = queue.Queue(maxsize=queue_length)
        self.origin_size: tuple[int, int] = (0, 0)  # height, width
        self.callback: Optional[ResultCallback] = None
        self.user_data: Any = None
        self._running = False
        self._wake = threading.Event()

    def send_frame(self, frame: Frame, timeout: Optional[float] = -1) -> None:
        """Queue a copy of ``frame``.

        ``timeout`` is in milliseconds; ``None`` or a negative value blocks until
        there is room, ``0`` does not wait. Raises PipelineError if the queue stays full.
        """
        height, width = self.origin_size
        if height == 0 or width == 0:
            self.origin_size = (frame.height, frame.width)
            logger.debug("origin size fallback to %d %d", frame.height, frame.width)

        copy = replace(frame)
        try:
            if timeout is None or timeout < 0:
                self.input_queue.put(copy)
            elif timeout == 0:
                self.input_queue.put_nowait(copy)
            else:
                self.input_queue.put(copy, timeout=timeout / 1000.0)
        except queue.Full as exc:
            logger.error("push frame failed: input queue is full")
            raise PipelineError("push frame failed: input queue is full") from exc

    def register_result_callback(self, callback: ResultCallback, user_data: Any = None) -> None:
        """Set the function called as ``callback(pipeline, result, user_data)``."""
        if self.callback is not None:
            raise PipelineError("a result callback is already registered")
        self.callback = callback
        self.user_data = user_data

    def start(self) -> None:
        """Start the processing and result threads."""
        if self._running:
            raise PipelineError("pipeline is still running")
        self._running = True
        self._wake.clear()
        threading.Thread(
            target=self._loop, args=(self.run, False), name="pipeline-run", daemon=True
        ).start()
        threading.Thread(
            target=self._loop,
            args=(self.result_callback_thread, True),
            name="pipeline-result",
            daemon=True,
        ).start()

    def _loop(self, step: Callable[[], Any], needs_callback: bool) -> None:
        logger.debug("%s thread start", threading.current_thread().name)
        while self.is_running():
            if needs_callback and self.callback is None:
                self._wake.wait(_IDLE_WAIT)
                continue
            try:
                step()
            except Exception:
                logger.exception("pipeline step failed")
                self._wake.wait(_IDLE_WAIT)

    def run(self) -> None:
        """Process one frame: take it from ``input_queue`` and handle its result.

        Subclasses override this; the base version only reports that and waits.
        """
        logger.error("run is not overridden in %s", type(self).__name__)
        self._wake.wait(_PLACEHOLDER_WAIT)

    def stop(self) -> None:
        """Ask the worker threads to finish."""
        self._running = False
        self._wake.set()

    def is_running(self) -> bool:
        return self._running

    def result_callback_thread(self) -> None:
        """Deliver one result to the registered callback.

        Subclasses override this; the base version only reports that and waits.
        """
        logger.error("result_callback_thread is not overridden in %s", type(self).__name__)
        self._wake.wait(_PLACEHOLDER_WAIT)