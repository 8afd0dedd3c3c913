"""Command entrypoint for the digit_predictor package."""

from __future__ import annotations

from digit_predictor.app import main

if __name__ == "__main__":
    main()
