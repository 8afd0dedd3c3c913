"""Centralized UI constants for the digit predictor window.

This file only stores values (numbers, colors, labels).
Keeping these in one place makes the UI easier to tune later because
you do not need to search through the full application for each value.
"""

# The stroke width is defined relative to a 380 px wide surface and scales
# with the actual surface width, so small and large canvases look alike.
STROKE_REFERENCE_WIDTH = 380
STROKE_REFERENCE_LINE_WIDTH = 20

# Preview of the 28x28 model input; each logical pixel is a 6x6 square.
PREVIEW_SIZE = 168

# Main window sizing defaults.
WINDOW_MIN_SIZE = (640, 520)

# Core color palette used by the app.
COLOR_BG = "#f3f7fb"
COLOR_CARD = "#ffffff"
COLOR_INK = "#0f172a"
COLOR_SUB = "#475569"
COLOR_EDGE = "#cbd5e1"

# Colors used by the status banner at the bottom.
COLOR_STATUS_INFO_BG = "#e0f2fe"
COLOR_STATUS_INFO_FG = "#0c4a6e"
COLOR_STATUS_WARN_BG = "#fff7ed"
COLOR_STATUS_WARN_FG = "#9a3412"

# Neutral button colors (normal, hover, pressed).
COLOR_NEUTRAL_BTN = "#e5e7eb"
COLOR_NEUTRAL_BTN_HOVER = "#d1d5db"
COLOR_NEUTRAL_BTN_PRESS = "#c7ccd4"

# How often the Tk thread checks for finished predictions.
RESULT_POLL_INTERVAL_MS = 50
