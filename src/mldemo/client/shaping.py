"""Feature shaping: domain requests to the exact wire bodies each backend reads."""

from typing import Any

from mldemo.common.errors import ContractError
from mldemo.common.schemas import (
    ImageInferenceRequest,
    IrisRequest,
    SentimentRequest,
    SurvivalFeatureVector,
    SurvivalRequest,
)
from mldemo.common.wire import ImageContract


def survival_features(request: SurvivalRequest) -> SurvivalFeatureVector:
    """
    Encode a passenger profile into the 8-field survival feature vector.

    The order is fixed by the trained model and must not change:
    [pclass, sex, age, fare, embarked_Q, embarked_S, family_size, is_alone].

    Cherbourg is the one-hot baseline, so `embarked == "C"` leaves both
    indicators at zero.
    """
    sex_encoded = 1 if request.sex == "female" else 0

    embarked_q = 1 if request.embarked == "Q" else 0
    embarked_s = 1 if request.embarked == "S" else 0

    family_size = request.sibsp + request.parch + 1
    is_alone = 1 if family_size == 1 else 0

    return (
        request.pclass,
        sex_encoded,
        request.age,
        request.fare,
        embarked_q,
        embarked_s,
        family_size,
        is_alone,
    )


def shape_survival(request: SurvivalRequest) -> dict[str, Any]:
    return {"features": list(survival_features(request))}


def shape_digit(
    request: ImageInferenceRequest, contract: ImageContract
) -> dict[str, Any]:
    """
    Place the captured raster under the field the configured contract names.

    Raises
    ------
    ContractError
        If the request lacks the representation the contract needs (e.g. a
        `v1` backend but only an encoded image was captured).
    """
    payload = getattr(request, contract.representation)

    if payload is None:
        raise ContractError(
            f"image contract {contract.version} needs {contract.representation!r}",
            "digit",
        )

    return {contract.field: payload}


def shape_sentiment(request: SentimentRequest) -> dict[str, Any]:
    # Tokenization and sequence encoding happen server side.
    return {"review": request.review}


def shape_iris(request: IrisRequest) -> dict[str, Any]:
    return {
        "features": [
            request.sepal_length,
            request.sepal_width,
            request.petal_length,
            request.petal_width,
        ]
    }
