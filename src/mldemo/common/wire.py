"""
Request bodies and response shapes exchanged with the four backends.

These models describe the network contract only. They are shared by the
client (to validate what comes back) and by the contract stub (to validate
what comes in), so both sides stay in lockstep.
"""

from dataclasses import dataclass
from typing import Final, Literal

from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr

# Endpoint paths relative to the shared base URL.
DIGIT_PATH: Final[str] = "/mnist/predict"
SENTIMENT_PATH: Final[str] = "/lstm/predict"
SURVIVAL_PATH: Final[str] = "/api/titanic/predict"
IRIS_PATH: Final[str] = "/knn/predict"

# Localized outcome labels emitted by the survival backend.
SURVIVED_LABEL: Final[str] = "생존"
DIED_LABEL: Final[str] = "사망"


@dataclass(frozen=True)
class ImageContract:
    """
    A revision of the digit backend's request contract.

    Attributes
    ----------
    version : str
        Identifier configured on the client (`MLDEMO_IMAGE_CONTRACT`).
    field : str
        Name of the single request field the backend reads.
    representation : str
        Which `ImageInferenceRequest` attribute fills that field.
    """

    version: str
    field: str
    representation: Literal["image_base64", "pixels"]


IMAGE_CONTRACTS: Final[dict[str, ImageContract]] = {
    # Earlier backend revision: raw 28x28 pixel array.
    "v1": ImageContract("v1", "image_pixels", "pixels"),
    # Active backend revision: canvas data URL as a string.
    "v2": ImageContract("v2", "image_base64", "image_base64"),
}

DEFAULT_IMAGE_CONTRACT: Final[str] = "v2"


class DigitBody(BaseModel):
    image_base64: str = Field(min_length=1)


class SentimentBody(BaseModel):
    review: str


class SurvivalBody(BaseModel):
    features: list[float] = Field(min_length=8, max_length=8)


class IrisBody(BaseModel):
    features: list[float] = Field(min_length=4, max_length=4)


class DigitReply(BaseModel):
    prediction: StrictInt


class SentimentReply(BaseModel):
    # The backend has been seen to send a string; numbers are accepted too.
    probability: StrictStr | StrictInt | StrictFloat


class LabelReply(BaseModel):
    """Reply of the survival and iris backends: a bare label."""

    prediction: StrictStr
