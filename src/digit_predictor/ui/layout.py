"""Layout, style, and key-binding helpers for the digit predictor UI."""

from __future__ import annotations

import tkinter as tk
from tkinter import ttk

from digit_predictor.ui.constants import (
    COLOR_BG,
    COLOR_CARD,
    COLOR_EDGE,
    COLOR_INK,
    COLOR_NEUTRAL_BTN,
    COLOR_NEUTRAL_BTN_HOVER,
    COLOR_NEUTRAL_BTN_PRESS,
    COLOR_STATUS_INFO_BG,
    COLOR_STATUS_INFO_FG,
    COLOR_SUB,
    PREVIEW_SIZE,
)


def configure_styles(root: tk.Tk) -> None:
    """Define ttk style rules so widgets share one visual language."""
    style = ttk.Style(root)
    style.theme_use("clam")

    style.configure("App.TFrame", background=COLOR_BG)

    style.configure(
        "Title.TLabel",
        background=COLOR_BG,
        foreground=COLOR_INK,
        font=("Avenir Next", 20, "bold"),
    )
    style.configure(
        "Subtitle.TLabel",
        background=COLOR_BG,
        foreground=COLOR_SUB,
        font=("Avenir Next", 11),
    )
    style.configure(
        "Prediction.TLabel",
        background=COLOR_CARD,
        foreground=COLOR_INK,
        font=("Avenir Next", 28, "bold"),
    )
    style.configure(
        "Body.TLabel",
        background=COLOR_CARD,
        foreground=COLOR_SUB,
        font=("Avenir Next", 10),
    )

    style.configure(
        "Card.TLabelframe",
        background=COLOR_CARD,
        foreground=COLOR_INK,
        borderwidth=1,
        relief="solid",
    )
    style.configure(
        "Card.TLabelframe.Label",
        background=COLOR_CARD,
        foreground=COLOR_INK,
        font=("Avenir Next", 10, "bold"),
    )

    style.configure(
        "Neutral.TButton",
        background=COLOR_NEUTRAL_BTN,
        foreground="#1f2937",
        borderwidth=1,
        font=("Avenir Next", 10, "bold"),
        padding=(12, 8),
    )
    style.map(
        "Neutral.TButton",
        background=[("active", COLOR_NEUTRAL_BTN_HOVER), ("pressed", COLOR_NEUTRAL_BTN_PRESS)],
        foreground=[("disabled", "#9ca3af"), ("!disabled", "#111827")],
    )


def bind_shortcuts(ui: object) -> None:
    """Register keyboard shortcuts for fast interaction."""
    ui.root.bind("<Return>", lambda _e: ui.predict_drawing())
    ui.root.bind("<KP_Enter>", lambda _e: ui.predict_drawing())
    ui.root.bind("c", lambda _e: ui.clear_drawing())
    ui.root.bind("C", lambda _e: ui.clear_drawing())
    ui.root.bind("<Escape>", lambda _e: ui.clear_drawing())


def build_layout(ui: object, canvas_size: int) -> None:
    """Create top-level layout containers and major UI sections."""
    outer = ttk.Frame(ui.root, padding=14, style="App.TFrame")
    outer.pack(fill="both", expand=True)

    _build_header(outer)
    _build_main_area(ui, outer, canvas_size)
    _build_status(ui, outer)


def _build_header(parent: ttk.Frame) -> None:
    header = ttk.Frame(parent, style="App.TFrame")
    header.pack(fill="x", pady=(0, 10))

    ttk.Label(header, text="Digit Image Predictor", style="Title.TLabel").pack(anchor="w")
    ttk.Label(
        header,
        text="Draw a single number from 0-9 below.",
        style="Subtitle.TLabel",
    ).pack(anchor="w", pady=(2, 0))


def _build_main_area(ui: object, parent: ttk.Frame, canvas_size: int) -> None:
    results = ttk.Frame(parent, style="App.TFrame")
    results.pack(fill="both", expand=True)

    draw_frame = ttk.LabelFrame(results, text="Drawing", padding=10, style="Card.TLabelframe")
    draw_frame.pack(side="left", fill="both", expand=True, padx=(0, 10))

    ui.draw_canvas = tk.Canvas(
        draw_frame,
        width=canvas_size,
        height=canvas_size,
        bg="#ffffff",
        highlightthickness=0,
        cursor="crosshair",
        takefocus=1,
    )
    ui.draw_canvas.pack(fill="both", expand=True)
    ui.draw_canvas.bind("<Button-1>", ui._on_stroke_start)
    ui.draw_canvas.bind("<B1-Motion>", ui._on_stroke_move)
    ui.draw_canvas.bind("<ButtonRelease-1>", ui._on_stroke_end)
    ui.draw_canvas.bind("<Leave>", ui._on_stroke_end)
    ui.draw_canvas.bind("<Configure>", ui._on_canvas_resize)

    buttons = ttk.Frame(draw_frame, style="App.TFrame")
    buttons.pack(fill="x", pady=(10, 0))
    ttk.Button(
        buttons,
        text="Clear",
        command=ui.clear_drawing,
        style="Neutral.TButton",
    ).pack(side="left", fill="x", expand=True, padx=(0, 6))
    ui.predict_button = ttk.Button(
        buttons,
        text="Predict",
        command=ui.predict_drawing,
        style="Neutral.TButton",
    )
    ui.predict_button.pack(side="left", fill="x", expand=True)

    side = ttk.Frame(results, style="App.TFrame")
    side.pack(side="left", fill="y")

    preview_frame = ttk.LabelFrame(
        side,
        text="Model Input (28x28)",
        padding=8,
        style="Card.TLabelframe",
    )
    preview_frame.pack(fill="x")
    ui.preview_canvas = tk.Canvas(
        preview_frame,
        width=PREVIEW_SIZE,
        height=PREVIEW_SIZE,
        bg="#ffffff",
        highlightthickness=1,
        highlightbackground=COLOR_EDGE,
    )
    ui.preview_canvas.pack()

    result_frame = ttk.LabelFrame(side, text="Result", padding=8, style="Card.TLabelframe")
    result_frame.pack(fill="x", pady=(10, 0))
    ttk.Label(result_frame, textvariable=ui.prediction_var, style="Prediction.TLabel").pack(anchor="w")
    ttk.Label(
        result_frame,
        text="Shortcuts: Enter=predict, C/Esc=clear.",
        style="Body.TLabel",
    ).pack(anchor="w", pady=(6, 0))


def _build_status(ui: object, parent: ttk.Frame) -> None:
    status_frame = ttk.Frame(parent, style="App.TFrame")
    status_frame.pack(fill="x", pady=(8, 0))

    ui.status_label = tk.Label(
        status_frame,
        textvariable=ui.status_var,
        bg=COLOR_STATUS_INFO_BG,
        fg=COLOR_STATUS_INFO_FG,
        font=("Avenir Next", 10, "bold"),
        padx=10,
        pady=8,
        anchor="w",
        relief="flat",
    )
    ui.status_label.pack(fill="x", anchor="w")
