from typing import Final

from fastapi import APIRouter

from mldemo.common.wire import (
    DIED_LABEL,
    DIGIT_PATH,
    IRIS_PATH,
    SENTIMENT_PATH,
    SURVIVAL_PATH,
    SURVIVED_LABEL,
    DigitBody,
    IrisBody,
    SentimentBody,
    SurvivalBody,
)

API_PREFIX: Final[str] = "/api"

router: Final[APIRouter] = APIRouter(prefix=API_PREFIX)

# Model domain served under each full route path.
ROUTE_DOMAINS: Final[dict[str, str]] = {
    API_PREFIX + DIGIT_PATH: "digit",
    API_PREFIX + SENTIMENT_PATH: "sentiment",
    API_PREFIX + SURVIVAL_PATH: "survival",
    API_PREFIX + IRIS_PATH: "iris",
}

POSITIVE_WORDS: Final[frozenset[str]] = frozenset(
    {"good", "great", "excellent", "love", "loved", "best", "fun", "wonderful"}
)
NEGATIVE_WORDS: Final[frozenset[str]] = frozenset(
    {"bad", "awful", "boring", "hate", "hated", "worst", "terrible", "dull"}
)


@router.post(DIGIT_PATH)
def predict_digit(body: DigitBody):
    """
    Return a bare digit class, like the real backend.

    The stub does not decode the image; the class is derived from the
    payload length so that equal inputs give equal answers.
    """
    return {"prediction": len(body.image_base64) % 10}


@router.post(SENTIMENT_PATH)
def predict_sentiment(body: SentimentBody):
    """
    Return the positive-class probability as a string, like the real backend.

    Scores by counting a handful of opinion words.
    """
    words = body.review.lower().split()
    positive = sum(word in POSITIVE_WORDS for word in words)
    negative = sum(word in NEGATIVE_WORDS for word in words)

    probability = min(max(0.5 + 0.16 * (positive - negative), 0.05), 0.95)

    return {"probability": f"{probability:.2f}"}


@router.post(SURVIVAL_PATH)
def predict_survival(body: SurvivalBody):
    """
    Return a localized outcome label, like the real backend.

    Women and children outside third class survive; everyone else does not.
    """
    pclass, sex, age = body.features[0], body.features[1], body.features[2]

    survived = sex == 1 or (age < 10 and pclass < 3)

    return {"prediction": SURVIVED_LABEL if survived else DIED_LABEL}


@router.post(IRIS_PATH)
def predict_iris(body: IrisBody):
    """Return a bare species name from the textbook petal thresholds."""
    petal_length, petal_width = body.features[2], body.features[3]

    if petal_length < 2.5:
        species = "setosa"
    elif petal_length < 4.9 and petal_width < 1.7:
        species = "versicolor"
    else:
        species = "virginica"

    return {"prediction": species}
