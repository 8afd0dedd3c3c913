"""Prediction lifecycle and the background worker that talks to the classifier.

This module owns all threading/queue behavior for remote predictions.
Keeping it isolated from Tkinter controller code makes the UI class easier
to reason about and easier to test.

Lifecycle: ``READY -> PREDICTING -> (PREDICTED | FAILED) -> READY``.
Only one request may be in flight; every request carries a tag so a
response that arrives after its request was abandoned is dropped.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from queue import Empty, Queue
from threading import Event, Lock, Thread
from typing import Callable

import numpy as np

from digit_predictor.errors import DigitPredictorError, PredictionInProgressError
from digit_predictor.logging_setup import get_logger

log = get_logger(__name__)


class PredictionState(enum.Enum):
    READY = "ready"
    PREDICTING = "predicting"
    PREDICTED = "predicted"
    FAILED = "failed"


class PredictionSession:
    """State machine for a sequence of prediction requests.

    Not thread-safe by itself; ``PredictionWorker`` guards it with a lock.
    """

    def __init__(self) -> None:
        self._state = PredictionState.READY
        self._tag = 0
        self.value: int | None = None
        self.error: DigitPredictorError | None = None

    @property
    def state(self) -> PredictionState:
        return self._state

    @property
    def latest_tag(self) -> int:
        return self._tag

    def begin(self) -> int:
        """Enter PREDICTING and return the tag for the new request."""
        if self._state is PredictionState.PREDICTING:
            raise PredictionInProgressError()
        # A settled PREDICTED/FAILED session passes through READY first.
        self.reset()
        self._tag += 1
        self._state = PredictionState.PREDICTING
        return self._tag

    def complete(self, tag: int, value: int) -> bool:
        if not self._is_current(tag):
            return False
        self.value = value
        self._state = PredictionState.PREDICTED
        return True

    def fail(self, tag: int, error: DigitPredictorError) -> bool:
        if not self._is_current(tag):
            return False
        self.error = error
        self._state = PredictionState.FAILED
        return True

    def abandon(self) -> None:
        """Forget the current request; any response or outcome for it is stale."""
        self._tag += 1
        if self._state is PredictionState.PREDICTING:
            self._state = PredictionState.READY

    def reset(self) -> None:
        """Return a settled session to READY."""
        if self._state is PredictionState.PREDICTING:
            raise PredictionInProgressError()
        self._state = PredictionState.READY
        self.value = None
        self.error = None

    def _is_current(self, tag: int) -> bool:
        return tag == self._tag and self._state is PredictionState.PREDICTING


@dataclass(frozen=True)
class PredictionOutcome:
    """Result of one finished request: either ``value`` or ``error`` is set."""

    tag: int
    value: int | None = None
    error: DigitPredictorError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PredictionWorker:
    """Threaded worker that runs classifier calls off the Tk main thread.

    Design goals:
    - never run two requests at once; ``submit`` refuses while busy
    - keep ``submit(...)`` non-blocking so button handlers stay snappy
    - expose ``poll_latest(...)`` so the UI applies only the current result
    """

    def __init__(self, predict_fn: Callable[[np.ndarray], int]) -> None:
        self._predict_fn = predict_fn
        self._session = PredictionSession()
        self._lock = Lock()
        self._input_queue: Queue[tuple[int, np.ndarray]] = Queue(maxsize=1)
        self._result_queue: Queue[PredictionOutcome] = Queue(maxsize=1)
        self._stop_event = Event()
        self._thread: Thread | None = None

    @property
    def state(self) -> PredictionState:
        with self._lock:
            return self._session.state

    def start(self) -> None:
        """Start the worker thread once."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = Thread(target=self._run_loop, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Signal worker shutdown."""
        self._stop_event.set()

    def is_stopped(self) -> bool:
        """Check whether worker has been requested to stop."""
        return self._stop_event.is_set()

    def submit(self, x: np.ndarray) -> int | None:
        """Queue a feature vector for prediction.

        Returns the request tag, or ``None`` when a request is already in
        flight and this one was rejected.
        """
        with self._lock:
            try:
                tag = self._session.begin()
            except PredictionInProgressError:
                log.info("prediction rejected, request already in flight")
                return None

        # Anything still queued belongs to an abandoned request.
        try:
            while True:
                self._input_queue.get_nowait()
        except Empty:
            pass
        self._input_queue.put_nowait((tag, np.array(x, copy=True)))
        return tag

    def abandon(self) -> None:
        """Drop the in-flight request, e.g. when the drawing was cleared."""
        with self._lock:
            self._session.abandon()
        try:
            while True:
                self._result_queue.get_nowait()
        except Empty:
            pass

    def reset(self) -> None:
        """Acknowledge a PREDICTED/FAILED result and return to READY."""
        with self._lock:
            if self._session.state is not PredictionState.PREDICTING:
                self._session.reset()

    def poll_latest(self) -> PredictionOutcome | None:
        """Return the newest completed outcome for the current request, if any."""
        latest: PredictionOutcome | None = None
        try:
            while True:
                latest = self._result_queue.get_nowait()
        except Empty:
            pass
        if latest is None:
            return None
        with self._lock:
            if latest.tag != self._session.latest_tag:
                return None
        return latest

    def _execute(self, tag: int, x: np.ndarray) -> PredictionOutcome:
        try:
            return PredictionOutcome(tag=tag, value=self._predict_fn(x))
        except DigitPredictorError as ex:
            log.warning("prediction failed", tag=tag, error=str(ex))
            return PredictionOutcome(tag=tag, error=ex)
        except Exception as ex:
            log.exception("prediction raised unexpectedly", tag=tag)
            return PredictionOutcome(tag=tag, error=DigitPredictorError(f"Prediction failed: {ex}"))

    def _run_loop(self) -> None:
        """Internal worker loop.

        This function avoids any Tk calls. It only turns queued inputs into
        outcomes.
        """
        while not self._stop_event.is_set():
            try:
                tag, x = self._input_queue.get(timeout=0.1)
            except Empty:
                continue

            outcome = self._execute(tag, x)
            with self._lock:
                if outcome.ok:
                    accepted = self._session.complete(tag, outcome.value)
                else:
                    accepted = self._session.fail(tag, outcome.error)
            if not accepted:
                log.debug("discarding stale prediction", tag=tag)
                continue

            try:
                # Keep only the freshest outcome.
                while True:
                    self._result_queue.get_nowait()
            except Empty:
                pass
            self._result_queue.put(outcome)
