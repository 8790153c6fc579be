"""
Response normalization: raw decoded JSON to typed domain results.

Every function here is pure. A body that is not an object or lacks the
expected field raises `DecodeError`; a field of the wrong type or an
unusable value raises `ResponseValueError`. The only values ever
synthesized are the documented placeholders, tagged
`Provenance.PLACEHOLDER`.
"""

import math
from typing import Any, Final, TypeVar

from pydantic import BaseModel, ValidationError

from mldemo.common.errors import DecodeError, ResponseValueError
from mldemo.common.schemas import (
    ImageInferenceResponse,
    IrisResult,
    Provenance,
    SentimentResult,
    SurvivalResult,
)
from mldemo.common.wire import (
    DIED_LABEL,
    SURVIVED_LABEL,
    DigitReply,
    LabelReply,
    SentimentReply,
)

# Stand-in survival probabilities; the backend returns a label only.
SURVIVED_PLACEHOLDER: Final[float] = 0.75
DIED_PLACEHOLDER: Final[float] = 0.25

# Stand-in confidence for backends that return a bare prediction.
CONFIDENCE_PLACEHOLDER: Final[float] = 1.0

SENTIMENT_THRESHOLD: Final[float] = 0.5

# Validation error types meaning "the shape is wrong", as opposed to
# "a value is wrong".
_SHAPE_ERRORS: Final[frozenset[str]] = frozenset(
    {"missing", "model_type", "model_attributes_type", "dict_type"}
)


T = TypeVar("T", bound=BaseModel)


def _parse(reply: type[T], body: Any, domain: str) -> T:
    try:
        return reply.model_validate(body)
    except ValidationError as exc:
        if any(error["type"] in _SHAPE_ERRORS for error in exc.errors()):
            raise DecodeError(f"malformed {domain} response: {body!r}", domain) from exc

        raise ResponseValueError(
            f"unexpected value in {domain} response: {body!r}", domain
        ) from exc


def normalize_survival(body: Any) -> SurvivalResult:
    """
    Map the survival backend's localized label to a binary outcome.

    Unknown labels are rejected rather than guessed at.
    """
    reply = _parse(LabelReply, body, "survival")

    if reply.prediction == SURVIVED_LABEL:
        survived = 1
    elif reply.prediction == DIED_LABEL:
        survived = 0
    else:
        raise ResponseValueError(
            f"unknown survival label {reply.prediction!r}", "survival"
        )

    return SurvivalResult(
        survived=survived,
        probability=SURVIVED_PLACEHOLDER if survived == 1 else DIED_PLACEHOLDER,
        probability_source=Provenance.PLACEHOLDER,
    )


def normalize_digit(body: Any) -> ImageInferenceResponse:
    reply = _parse(DigitReply, body, "digit")

    if not 0 <= reply.prediction <= 9:
        raise ResponseValueError(f"digit out of range: {reply.prediction}", "digit")

    return ImageInferenceResponse(
        prediction=reply.prediction,
        confidence=CONFIDENCE_PLACEHOLDER,
        confidence_source=Provenance.PLACEHOLDER,
    )


def normalize_sentiment(body: Any) -> SentimentResult:
    """
    Parse the sentiment probability and derive the label at 0.5.

    The probability may arrive as a string ("0.82") or a number.
    """
    reply = _parse(SentimentReply, body, "sentiment")

    try:
        probability = float(reply.probability)
    except (ValueError, OverflowError) as exc:
        raise ResponseValueError(
            f"sentiment probability is not numeric: {reply.probability!r}",
            "sentiment",
        ) from exc

    if not math.isfinite(probability) or not 0.0 <= probability <= 1.0:
        raise ResponseValueError(
            f"sentiment probability out of range: {reply.probability!r}",
            "sentiment",
        )

    return SentimentResult(
        sentiment="Positive" if probability >= SENTIMENT_THRESHOLD else "Negative",
        probability=probability,
        probability_source=Provenance.MODEL,
    )


def normalize_iris(body: Any) -> IrisResult:
    reply = _parse(LabelReply, body, "iris")

    return IrisResult(
        prediction=reply.prediction,
        confidence=CONFIDENCE_PLACEHOLDER,
        confidence_source=Provenance.PLACEHOLDER,
    )
