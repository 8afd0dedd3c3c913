"""Logic tests for the Tk controller.

These build lightweight shells instead of real Tk widgets so they stay fast
and run headless.
"""

from __future__ import annotations

import numpy as np

import digit_predictor.app as app_mod
from digit_predictor.errors import TransportError
from digit_predictor.services.prediction import PredictionOutcome, PredictionState
from digit_predictor.ui.canvas import DrawingSurface


class _DummyVar:
    """Simple stand-in for tkinter.StringVar used in logic tests."""

    def __init__(self) -> None:
        self.value = ""

    def set(self, value: str) -> None:
        self.value = value


class _DummyWidget:
    def __init__(self) -> None:
        self.options: dict[str, object] = {}
        self.states: list[list[str]] = []
        self.deleted = 0

    def configure(self, **kwargs) -> None:
        self.options.update(kwargs)

    def state(self, spec: list[str]) -> None:
        self.states.append(spec)

    def delete(self, _what: str) -> None:
        self.deleted += 1


class _FakeClient:
    def __init__(self, value: int | None = None, error: Exception | None = None) -> None:
        self.value = value
        self.error = error
        self.calls: list[np.ndarray] = []

    def predict(self, features: np.ndarray) -> int:
        self.calls.append(features)
        if self.error is not None:
            raise self.error
        return self.value


class _BusyWorker:
    state = PredictionState.PREDICTING

    def submit(self, _x):  # noqa: ANN001 - never reached in these tests
        raise AssertionError("busy worker must not receive submissions")


def _make_ui_shell(client: _FakeClient) -> app_mod.DigitPredictorUI:
    """Create a controller object without constructing Tk widgets."""
    ui = app_mod.DigitPredictorUI.__new__(app_mod.DigitPredictorUI)
    ui.surface = DrawingSurface(120, 120)
    ui.client = client
    ui.status_var = _DummyVar()
    ui.prediction_var = _DummyVar()
    ui.status_label = _DummyWidget()
    ui.predict_button = _DummyWidget()
    ui.draw_canvas = _DummyWidget()
    ui.previews = []
    ui._draw_preview = lambda image_2d: ui.previews.append(image_2d)
    return ui


def _draw_one(ui: app_mod.DigitPredictorUI) -> None:
    ui.surface.begin_stroke(60, 20)
    ui.surface.extend_stroke(60, 100)
    ui.surface.end_stroke()


def test_predict_on_empty_canvas_warns_without_calling_service() -> None:
    client = _FakeClient(value=3)
    ui = _make_ui_shell(client)

    ui.predict_drawing()

    assert client.calls == []
    assert ui.prediction_var.value == "Prediction: -"
    assert "Draw a digit first" in ui.status_var.value
    assert ui.status_label.options["bg"] == app_mod.COLOR_STATUS_WARN_BG


def test_predict_shows_digit_and_preview() -> None:
    client = _FakeClient(value=1)
    ui = _make_ui_shell(client)
    _draw_one(ui)

    ui.predict_drawing()

    assert len(client.calls) == 1
    assert client.calls[0].shape == (784,)
    assert ui.prediction_var.value == "You drew: 1"
    assert ui.previews[-1].shape == (28, 28)
    assert ui.status_label.options["bg"] == app_mod.COLOR_STATUS_INFO_BG


def test_predict_zero_is_displayed_as_a_digit() -> None:
    ui = _make_ui_shell(_FakeClient(value=0))
    _draw_one(ui)

    ui.predict_drawing()

    assert ui.prediction_var.value == "You drew: 0"


def test_transport_failure_shows_error_not_a_number() -> None:
    client = _FakeClient(error=TransportError("Server responded with 500", status_code=500))
    ui = _make_ui_shell(client)
    _draw_one(ui)

    ui.predict_drawing()

    assert ui.prediction_var.value == "Prediction: -"
    assert ui.status_var.value == "Error: Server responded with 500"
    assert ui.status_label.options["bg"] == app_mod.COLOR_STATUS_WARN_BG
    assert ui.predict_button.states[-1] == ["!disabled"]


def test_predict_is_refused_while_a_request_is_in_flight() -> None:
    client = _FakeClient(value=2)
    ui = _make_ui_shell(client)
    ui._worker = _BusyWorker()
    _draw_one(ui)

    ui.predict_drawing()

    assert client.calls == []
    assert ui.status_var.value == "A prediction is already running."


def test_apply_outcome_renders_failure_and_success() -> None:
    ui = _make_ui_shell(_FakeClient())

    ui._apply_outcome(PredictionOutcome(tag=1, error=TransportError("offline")))
    assert ui.status_var.value == "Error: offline"

    ui._apply_outcome(PredictionOutcome(tag=2, value=8))
    assert ui.prediction_var.value == "You drew: 8"


def test_clear_drawing_resets_surface_and_labels() -> None:
    ui = _make_ui_shell(_FakeClient(value=4))
    _draw_one(ui)
    ui.predict_drawing()

    ui.clear_drawing()

    assert ui.prediction_var.value == "Prediction: -"
    assert ui.status_var.value == "Drawing cleared."
    assert ui.draw_canvas.deleted == 1
    assert np.all(ui.surface.snapshot().pixels == 255)
    assert np.all(ui.previews[-1] == 0.0)
