"""Command-line and environment configuration for the predictor app."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from typing import Mapping, Sequence

DEFAULT_SERVICE_URL = "https://api.digitimagepredictor.com/predict"
DEFAULT_TIMEOUT_S = 30.0
DEFAULT_CANVAS_SIZE = 380
DEFAULT_LOG_LEVEL = "INFO"

ENV_SERVICE_URL = "DIGIT_PREDICTOR_URL"
ENV_TIMEOUT = "DIGIT_PREDICTOR_TIMEOUT"
ENV_LOG_LEVEL = "DIGIT_PREDICTOR_LOG_LEVEL"


@dataclass(frozen=True)
class AppConfig:
    service_url: str
    timeout_s: float
    canvas_size: int
    log_level: str


class ArgConfigLoader:
    """Build an ``AppConfig`` from argv, with defaults taken from the environment."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def parse(self, argv: Sequence[str] | None = None) -> AppConfig:
        env = self._environ
        parser = argparse.ArgumentParser(description="Draw a digit and ask a remote classifier what it is.")
        parser.add_argument(
            "--url",
            default=env.get(ENV_SERVICE_URL, DEFAULT_SERVICE_URL),
            help="Prediction endpoint that accepts the 784-value JSON payload.",
        )
        parser.add_argument(
            "--timeout",
            type=float,
            default=env.get(ENV_TIMEOUT, str(DEFAULT_TIMEOUT_S)),
            help="HTTP timeout in seconds.",
        )
        parser.add_argument(
            "--canvas-size",
            type=int,
            default=DEFAULT_CANVAS_SIZE,
            help="Drawing surface size in pixels (square).",
        )
        parser.add_argument(
            "--log-level",
            default=env.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL),
            choices=("DEBUG", "INFO", "WARNING", "ERROR"),
            type=str.upper,
        )
        args = parser.parse_args(argv)

        if args.timeout <= 0:
            parser.error("--timeout must be positive")
        if args.canvas_size < 28:
            parser.error("--canvas-size must be at least 28")

        return AppConfig(
            service_url=str(args.url),
            timeout_s=float(args.timeout),
            canvas_size=int(args.canvas_size),
            log_level=str(args.log_level),
        )
