"""HTTP client for the remote digit classification service.

Request body: ``{"image": [784 floats in [0, 1]]}`` posted as JSON.

Response schema, checked in this order:
- a JSON object with a non-null ``prediction`` key
- a JSON object with a non-null ``digit`` key
- a bare JSON scalar, which is the prediction itself

The value must be a digit 0-9 (int, integral float or decimal string).

Presence is checked explicitly, so a legitimate ``0`` is never confused
with a missing field.
"""

from __future__ import annotations

import json
from typing import Any

import httpx
import numpy as np

from digit_predictor.errors import MalformedResponseError, TransportError
from digit_predictor.logging_setup import get_logger

log = get_logger(__name__)

FEATURE_LENGTH = 28 * 28
PREDICTION_FIELDS = ("prediction", "digit")
DIGITS = range(10)


def build_payload(features: np.ndarray) -> dict[str, list[float]]:
    """Wrap a feature vector in the JSON body the service expects."""
    flat = np.asarray(features, dtype=np.float32).reshape(-1)
    if flat.shape != (FEATURE_LENGTH,):
        raise ValueError(f"expected {FEATURE_LENGTH} features, got {flat.size}")
    return {"image": [float(v) for v in flat]}


def _coerce_prediction(value: Any) -> int:
    # bool is an int subclass; true/false is not a digit.
    if isinstance(value, bool):
        raise MalformedResponseError(f"prediction must be a number, got {value!r}")
    if isinstance(value, int):
        digit = value
    elif isinstance(value, float) and value.is_integer():
        digit = int(value)
    elif isinstance(value, str) and value.strip().isdecimal() and value.strip().isascii():
        digit = int(value.strip())
    else:
        raise MalformedResponseError(f"unrecognized prediction value {value!r}")
    if digit not in DIGITS:
        raise MalformedResponseError(f"prediction {digit} is not a digit 0-9")
    return digit


def parse_prediction(body: Any) -> int:
    """Read the predicted digit out of a decoded JSON response body."""
    if isinstance(body, dict):
        for field in PREDICTION_FIELDS:
            if field in body and body[field] is not None:
                return _coerce_prediction(body[field])
        raise MalformedResponseError(
            f"response has none of the fields {', '.join(PREDICTION_FIELDS)}"
        )
    if body is None or isinstance(body, list):
        raise MalformedResponseError(f"unexpected response body {body!r}")
    return _coerce_prediction(body)


class ClassifierClient:
    """Sends feature vectors to the classification service.

    No retries happen here; failures surface as ``TransportError`` or
    ``MalformedResponseError`` and the caller decides what to show.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._url = url
        self._client = httpx.Client(timeout=timeout, follow_redirects=True, transport=transport)

    @property
    def url(self) -> str:
        return self._url

    def predict(self, features: np.ndarray) -> int:
        payload = build_payload(features)
        headers = {"Content-Type": "application/json", "Accept": "application/json"}

        try:
            response = self._client.post(self._url, content=json.dumps(payload), headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as ex:
            status = ex.response.status_code
            log.warning("classifier returned error status", url=self._url, status=status)
            raise TransportError(f"Server responded with {status}", status_code=status) from ex
        except (httpx.HTTPError, httpx.InvalidURL) as ex:
            log.warning("classifier request failed", url=self._url, error=str(ex))
            raise TransportError(f"Could not reach the classifier: {ex}") from ex

        try:
            body = response.json()
        except ValueError as ex:
            raise MalformedResponseError("classifier response is not valid JSON") from ex

        prediction = parse_prediction(body)
        log.info("classifier prediction received", status=response.status_code, prediction=prediction)
        return prediction

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> ClassifierClient:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()
