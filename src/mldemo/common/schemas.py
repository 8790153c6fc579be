from enum import StrEnum
from typing import Annotated, Final, Literal, Self, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Number of grayscale pixels in one 28x28 digit raster.
DIGIT_PIXELS: Final[int] = 28 * 28

# Port assumed when the caller does not collect one (Southampton).
DEFAULT_EMBARKED: Final[Literal["S"]] = "S"


class Provenance(StrEnum):
    """
    Where a confidence or probability value came from.

    `MODEL` values were produced by the backend model. `PLACEHOLDER` values
    were synthesized by the client because the backend does not return one.
    """

    MODEL = "model"
    PLACEHOLDER = "placeholder"


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class ImageInferenceRequest(_Record):
    """
    One digit-recognition attempt.

    Attributes
    ----------
    image_base64 : str | None
        The captured raster, string-encoded (typically a PNG data URL as
        produced by a canvas).
    pixels : list[float] | None
        Row-major 28x28 grayscale values, required only by backends that
        speak the `v1` image contract.
    """

    image_base64: Annotated[str, Field(min_length=1)] | None = None
    pixels: (
        Annotated[list[float], Field(min_length=DIGIT_PIXELS, max_length=DIGIT_PIXELS)]
        | None
    ) = None

    @model_validator(mode="after")
    def _has_payload(self) -> Self:
        if self.image_base64 is None and self.pixels is None:
            raise ValueError("either image_base64 or pixels is required")

        if self.pixels is not None and any(not 0 <= p <= 255 for p in self.pixels):
            raise ValueError("pixel values must lie in [0, 255]")

        return self


class ImageInferenceResponse(_Record):
    """Normalized digit result; confidence is always a placeholder."""

    prediction: int = Field(ge=0, le=9)
    confidence: float = Field(ge=0.0, le=1.0)
    confidence_source: Provenance

    @property
    def is_placeholder(self) -> bool:
        return self.confidence_source is Provenance.PLACEHOLDER


class SentimentRequest(_Record):
    """One review text; may be empty, the backend decides what that means."""

    review: str


class SentimentResult(_Record):
    """
    Normalized sentiment outcome.

    `sentiment` is "Positive" iff `probability >= 0.5`, otherwise
    "Negative". Both are `None` when no probability is available.
    """

    sentiment: Literal["Positive", "Negative"] | None
    probability: Annotated[float, Field(ge=0.0, le=1.0)] | None
    probability_source: Provenance = Provenance.MODEL

    @model_validator(mode="after")
    def _label_matches_probability(self) -> Self:
        if self.probability is None:
            if self.sentiment is not None:
                raise ValueError("sentiment must be unset without a probability")
            return self

        expected = "Positive" if self.probability >= 0.5 else "Negative"
        if self.sentiment != expected:
            raise ValueError(f"sentiment must be {expected!r} for {self.probability}")

        return self

    @property
    def is_placeholder(self) -> bool:
        return self.probability_source is Provenance.PLACEHOLDER


class SurvivalRequest(_Record):
    """
    One passenger profile.

    The embarkation port is optional because the survival view does not
    collect it; it defaults to `DEFAULT_EMBARKED`.
    """

    embarked: Literal["S", "C", "Q"] = DEFAULT_EMBARKED
    pclass: Literal[1, 2, 3]
    sex: Literal["male", "female"]
    age: float = Field(ge=0)
    sibsp: int = Field(ge=0)
    parch: int = Field(ge=0)
    fare: float = Field(ge=0)


# [pclass, sex, age, fare, embarked_Q, embarked_S, family_size, is_alone]
SurvivalFeatureVector: TypeAlias = tuple[float, float, float, float, int, int, int, int]


class SurvivalResult(_Record):
    """
    Normalized survival outcome.

    The backend only returns a label, so `probability` is a placeholder
    derived from `survived` alone (0.75 or 0.25), never a model estimate.
    """

    survived: Literal[0, 1]
    probability: float = Field(ge=0.0, le=1.0)
    probability_source: Provenance

    @property
    def outcome(self) -> Literal["died", "survived"]:
        return "survived" if self.survived == 1 else "died"

    @property
    def is_placeholder(self) -> bool:
        return self.probability_source is Provenance.PLACEHOLDER


class IrisRequest(_Record):
    """One flower measurement set, in centimetres."""

    sepal_length: float
    sepal_width: float
    petal_length: float
    petal_width: float


class IrisResult(_Record):
    """Normalized species outcome; confidence is always a placeholder."""

    prediction: str
    confidence: float = Field(ge=0.0, le=1.0)
    confidence_source: Provenance

    @property
    def is_placeholder(self) -> bool:
        return self.confidence_source is Provenance.PLACEHOLDER
