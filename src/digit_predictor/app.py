"""Tkinter window for drawing a digit and asking the remote classifier about it.

The window only deals with strokes and display. Preprocessing lives in
``digit_predictor.pipeline`` and the network exchange runs on
``PredictionWorker`` so the Tk thread never blocks on HTTP.
"""

from __future__ import annotations

import sys
import tkinter as tk
from pathlib import Path
from typing import Sequence

import numpy as np

# Allow running this file directly (e.g. `python src/digit_predictor/app.py`)
# by ensuring `src/` is on sys.path for absolute package imports.
if __package__ in (None, ""):
    sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from digit_predictor.config import AppConfig, ArgConfigLoader
from digit_predictor.errors import DigitPredictorError, EmptyCanvasError
from digit_predictor.logging_setup import get_logger, setup_logging
from digit_predictor.pipeline.preprocessing import preprocess_drawing
from digit_predictor.services.classifier_client import ClassifierClient
from digit_predictor.services.prediction import PredictionOutcome, PredictionState, PredictionWorker
from digit_predictor.ui.canvas import DrawingSurface, draw_pixel_grid
from digit_predictor.ui.constants import (
    COLOR_BG,
    COLOR_STATUS_INFO_BG,
    COLOR_STATUS_INFO_FG,
    COLOR_STATUS_WARN_BG,
    COLOR_STATUS_WARN_FG,
    PREVIEW_SIZE,
    RESULT_POLL_INTERVAL_MS,
    WINDOW_MIN_SIZE,
)
from digit_predictor.ui.layout import bind_shortcuts, build_layout, configure_styles

log = get_logger(__name__)


class DigitPredictorUI:
    """Controller for the drawing window.

    Owns the drawing surface, forwards strokes to it, and turns the
    prediction lifecycle into label/status updates.
    """

    def __init__(self, root: tk.Tk, config: AppConfig) -> None:
        self.root = root
        self.root.title("Digit Image Predictor")
        self.root.minsize(*WINDOW_MIN_SIZE)
        self.root.configure(bg=COLOR_BG)

        self.status_var = tk.StringVar(value="Ready. Draw a digit and press Predict.")
        self.prediction_var = tk.StringVar(value="Prediction: -")

        self.surface = DrawingSurface(config.canvas_size, config.canvas_size)
        self.client = ClassifierClient(config.service_url, timeout=config.timeout_s)
        self._worker: PredictionWorker | None = None
        # Last pointer position, used to draw the on-screen stroke segments.
        self._last_xy: tuple[int, int] = (0, 0)

        configure_styles(self.root)
        build_layout(self, config.canvas_size)
        bind_shortcuts(self)

        self._draw_preview(np.zeros((28, 28), dtype=np.float32))
        self._start_prediction_worker()
        self.root.protocol("WM_DELETE_WINDOW", self._on_close)
        log.info("ui started", service_url=config.service_url, canvas_size=config.canvas_size)

    def _set_status(self, message: str, level: str = "info") -> None:
        """Update bottom status banner text + color based on severity."""
        self.status_var.set(message)
        if level == "warn":
            self.status_label.configure(bg=COLOR_STATUS_WARN_BG, fg=COLOR_STATUS_WARN_FG)
        else:
            self.status_label.configure(bg=COLOR_STATUS_INFO_BG, fg=COLOR_STATUS_INFO_FG)

    # ------------------------------
    # Stroke handling
    # ------------------------------
    def _on_stroke_start(self, event: tk.Event) -> None:
        self.surface.begin_stroke(event.x, event.y)
        r = self.surface.line_width / 2.0
        self.draw_canvas.create_oval(event.x - r, event.y - r, event.x + r, event.y + r, fill="black", outline="")
        self._last_xy = (event.x, event.y)

    def _on_stroke_move(self, event: tk.Event) -> None:
        if not self.surface.is_drawing:
            return
        x0, y0 = self._last_xy
        self.surface.extend_stroke(event.x, event.y)
        self.draw_canvas.create_line(
            x0,
            y0,
            event.x,
            event.y,
            fill="black",
            width=self.surface.line_width,
            capstyle=tk.ROUND,
            joinstyle=tk.ROUND,
        )
        self._last_xy = (event.x, event.y)

    def _on_stroke_end(self, _event: tk.Event | None = None) -> None:
        self.surface.end_stroke()

    def _on_canvas_resize(self, event: tk.Event) -> None:
        """Match the surface to the widget size; like a canvas resize, this wipes the drawing."""
        if (event.width, event.height) == (self.surface.width, self.surface.height):
            return
        if event.width < 1 or event.height < 1:
            return
        self.surface.resize(event.width, event.height)
        self.draw_canvas.delete("all")

    def clear_drawing(self) -> None:
        """Clear the drawing and forget any prediction in flight."""
        worker = getattr(self, "_worker", None)
        if worker is not None:
            worker.abandon()
            worker.reset()
        self.surface.clear()
        self.draw_canvas.delete("all")
        self._draw_preview(np.zeros((28, 28), dtype=np.float32))
        self.prediction_var.set("Prediction: -")
        self.predict_button.state(["!disabled"])
        self._set_status("Drawing cleared.", level="info")

    # ------------------------------
    # Prediction
    # ------------------------------
    def predict_drawing(self) -> None:
        """Preprocess the current drawing and send it to the classifier."""
        worker = getattr(self, "_worker", None)
        if worker is not None and worker.state is PredictionState.PREDICTING:
            self._set_status("A prediction is already running.", level="warn")
            return

        try:
            result = preprocess_drawing(self.surface.snapshot())
        except EmptyCanvasError as ex:
            self.prediction_var.set("Prediction: -")
            self._set_status(str(ex), level="warn")
            return

        self._draw_preview(result.features.reshape(28, 28))

        if worker is None:
            # Lightweight shells used in tests have no worker thread.
            self._apply_outcome(self._predict_now(result.features))
            return

        if worker.submit(result.features) is None:
            self._set_status("A prediction is already running.", level="warn")
            return
        self.prediction_var.set("Predicting...")
        self.predict_button.state(["disabled"])
        self._set_status("Sending drawing to the classifier...", level="info")

    def _predict_now(self, features: np.ndarray) -> PredictionOutcome:
        try:
            return PredictionOutcome(tag=0, value=self.client.predict(features))
        except DigitPredictorError as ex:
            return PredictionOutcome(tag=0, error=ex)

    def _apply_outcome(self, outcome: PredictionOutcome) -> None:
        """Show a finished prediction (or its error) on the Tk thread."""
        self.predict_button.state(["!disabled"])
        if outcome.ok:
            self.prediction_var.set(f"You drew: {outcome.value}")
            self._set_status(f"Prediction complete: {outcome.value}.", level="info")
        else:
            self.prediction_var.set("Prediction: -")
            self._set_status(f"Error: {outcome.error}", level="warn")

        worker = getattr(self, "_worker", None)
        if worker is not None:
            worker.reset()

    def _start_prediction_worker(self) -> None:
        self._worker = PredictionWorker(predict_fn=self.client.predict)
        self._worker.start()
        self.root.after(RESULT_POLL_INTERVAL_MS, self._poll_prediction_results)

    def _poll_prediction_results(self) -> None:
        """Apply the newest finished prediction, if any.

        Polling is scheduled via Tk's timer so all UI mutations stay on the
        main thread (Tk is not thread-safe).
        """
        worker = getattr(self, "_worker", None)
        if worker is None:
            return
        latest = worker.poll_latest()
        if latest is not None:
            self._apply_outcome(latest)
        if not worker.is_stopped():
            self.root.after(RESULT_POLL_INTERVAL_MS, self._poll_prediction_results)

    def _draw_preview(self, image_2d: np.ndarray) -> None:
        draw_pixel_grid(canvas=self.preview_canvas, intensities=image_2d, margin=0, size=PREVIEW_SIZE)

    def _on_close(self) -> None:
        """Shutdown background worker and close the Tk window cleanly."""
        if self._worker is not None:
            self._worker.stop()
        self.client.close()
        self.root.destroy()


def main(argv: Sequence[str] | None = None) -> None:
    config = ArgConfigLoader().parse(argv)
    setup_logging(config.log_level)
    root = tk.Tk()
    DigitPredictorUI(root, config)
    root.mainloop()


if __name__ == "__main__":
    main()
