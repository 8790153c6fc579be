import pytest
from pydantic import ValidationError

from mldemo.client import shaping
from mldemo.common.errors import ContractError
from mldemo.common.schemas import (
    DIGIT_PIXELS,
    ImageInferenceRequest,
    IrisRequest,
    SentimentRequest,
    SurvivalRequest,
)
from mldemo.common.wire import IMAGE_CONTRACTS


def passenger(**overrides) -> SurvivalRequest:
    """Third-class male from the Titanic training set, with overrides."""
    fields = {
        "pclass": 3,
        "sex": "male",
        "age": 22,
        "sibsp": 1,
        "parch": 0,
        "fare": 7.25,
    }
    fields.update(overrides)
    return SurvivalRequest(**fields)


def test_survival_vector_matches_known_passenger():
    """A 22 year old third-class man travelling with one sibling."""
    request = passenger(embarked="S")
    assert shaping.shape_survival(request) == {
        "features": [3, 0, 22, 7.25, 0, 1, 2, 0]
    }


@pytest.mark.parametrize("sex, expected", [("female", 1), ("male", 0)])
def test_survival_sex_encoding(sex: str, expected: int):
    features = shaping.survival_features(passenger(sex=sex))
    assert len(features) == 8
    assert features[1] == expected


@pytest.mark.parametrize(
    "sibsp, parch, family_size, is_alone",
    [(0, 0, 1, 1), (1, 0, 2, 0), (0, 2, 3, 0), (3, 4, 8, 0)],
)
def test_survival_family_features(
    sibsp: int, parch: int, family_size: int, is_alone: int
):
    features = shaping.survival_features(passenger(sibsp=sibsp, parch=parch))
    assert features[6] == family_size
    assert features[7] == is_alone


def test_survival_port_defaults_to_southampton():
    """The survival form never collects the port, so S is assumed."""
    request = passenger()
    assert request.embarked == "S"

    features = shaping.survival_features(request)
    assert features[4] == 0
    assert features[5] == 1


@pytest.mark.parametrize("embarked, q, s", [("Q", 1, 0), ("S", 0, 1), ("C", 0, 0)])
def test_survival_port_one_hot(embarked: str, q: int, s: int):
    features = shaping.survival_features(passenger(embarked=embarked))
    assert features[4:6] == (q, s)


def test_survival_request_rejects_negative_counts():
    with pytest.raises(ValidationError):
        passenger(sibsp=-1)


def test_survival_request_rejects_unknown_class():
    with pytest.raises(ValidationError):
        passenger(pclass=4)


def test_iris_features_keep_measurement_order():
    request = IrisRequest(
        sepal_length=5.1, sepal_width=3.5, petal_length=1.4, petal_width=0.2
    )
    assert shaping.shape_iris(request) == {"features": [5.1, 3.5, 1.4, 0.2]}


def test_sentiment_forwards_text_unmodified():
    text = "  Not bad at all.  "
    assert shaping.shape_sentiment(SentimentRequest(review=text)) == {"review": text}


def test_sentiment_allows_empty_text():
    assert shaping.shape_sentiment(SentimentRequest(review="")) == {"review": ""}


def test_digit_v2_sends_encoded_image():
    request = ImageInferenceRequest(image_base64="data:image/png;base64,iVBORw0")
    body = shaping.shape_digit(request, IMAGE_CONTRACTS["v2"])
    assert body == {"image_base64": "data:image/png;base64,iVBORw0"}


def test_digit_v1_sends_pixels():
    pixels = [0.0] * DIGIT_PIXELS
    request = ImageInferenceRequest(pixels=pixels)
    body = shaping.shape_digit(request, IMAGE_CONTRACTS["v1"])
    assert body == {"image_pixels": pixels}


def test_digit_contract_without_matching_representation():
    """An encoded image alone cannot satisfy a pixel-array backend."""
    request = ImageInferenceRequest(image_base64="abc")
    with pytest.raises(ContractError) as excinfo:
        shaping.shape_digit(request, IMAGE_CONTRACTS["v1"])
    assert excinfo.value.domain == "digit"


def test_digit_request_needs_a_payload():
    with pytest.raises(ValidationError):
        ImageInferenceRequest()


def test_digit_request_rejects_empty_image():
    with pytest.raises(ValidationError):
        ImageInferenceRequest(image_base64="")


def test_digit_request_rejects_wrong_pixel_count():
    with pytest.raises(ValidationError):
        ImageInferenceRequest(pixels=[0.0] * 10)
