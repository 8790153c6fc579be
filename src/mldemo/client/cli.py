import asyncio
import base64
import sys
from argparse import ArgumentParser, Namespace
from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel, ValidationError

from mldemo.client.client import PredictionClient
from mldemo.client.config import get_settings
from mldemo.client.logs import configure_logging
from mldemo.common.errors import PredictionError
from mldemo.common.schemas import (
    ImageInferenceRequest,
    IrisRequest,
    SentimentRequest,
    SurvivalRequest,
)


def encode_image(path: Path) -> str:
    """Encode an image file as the PNG data URL a drawing canvas produces."""
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def build_parser() -> ArgumentParser:
    parser = ArgumentParser("mldemo-predict")

    parser.add_argument(
        "--url",
        "-u",
        type=str,
        default=None,
        help="Base URL of the model API (defaults to MLDEMO_API_BASE_URL)",
    )

    domains = parser.add_subparsers(dest="domain", required=True)

    digit = domains.add_parser("digit", help="Classify a handwritten digit image")
    digit.add_argument("image", type=Path, help="PNG file holding the digit")

    sentiment = domains.add_parser("sentiment", help="Score a review's sentiment")
    sentiment.add_argument("review", type=str, help="Review text to analyse")

    survival = domains.add_parser("survival", help="Predict Titanic survival")
    survival.add_argument("--pclass", type=int, choices=(1, 2, 3), required=True)
    survival.add_argument("--sex", choices=("male", "female"), required=True)
    survival.add_argument("--age", type=float, required=True)
    survival.add_argument("--sibsp", type=int, default=0)
    survival.add_argument("--parch", type=int, default=0)
    survival.add_argument("--fare", type=float, required=True)
    survival.add_argument(
        "--embarked",
        choices=("S", "C", "Q"),
        default=None,
        help="Embarkation port; Southampton when omitted",
    )

    iris = domains.add_parser("iris", help="Classify an iris flower")
    iris.add_argument("sepal_length", type=float)
    iris.add_argument("sepal_width", type=float)
    iris.add_argument("petal_length", type=float)
    iris.add_argument("petal_width", type=float)

    return parser


async def run(args: Namespace, client: PredictionClient) -> BaseModel:
    """Dispatch the parsed command to the matching prediction call."""
    match args.domain:
        case "digit":
            return await client.predict_digit(
                ImageInferenceRequest(image_base64=encode_image(args.image))
            )
        case "sentiment":
            return await client.predict_sentiment(SentimentRequest(review=args.review))
        case "survival":
            fields = {
                "pclass": args.pclass,
                "sex": args.sex,
                "age": args.age,
                "sibsp": args.sibsp,
                "parch": args.parch,
                "fare": args.fare,
            }
            if args.embarked is not None:
                fields["embarked"] = args.embarked
            return await client.predict_survival(SurvivalRequest(**fields))
        case "iris":
            return await client.predict_iris(
                IrisRequest(
                    sepal_length=args.sepal_length,
                    sepal_width=args.sepal_width,
                    petal_length=args.petal_length,
                    petal_width=args.petal_width,
                )
            )
        case _:
            raise ValueError(f"unknown domain {args.domain!r}")


async def _main(args: Namespace) -> BaseModel:
    settings = get_settings()

    client = PredictionClient(
        args.url or settings.API_BASE_URL,
        image_contract=settings.IMAGE_CONTRACT,
        timeout=settings.REQUEST_TIMEOUT,
    )

    async with client:
        return await run(args, client)


def main(argv: Sequence[str] | None = None) -> int:
    """
    Entry point for the `mldemo-predict` CLI tool.

    Parses the command line, sends one prediction request and prints the
    normalized result as JSON to stdout.

    Returns
    -------
    int
        0 on success, 1 if the input was invalid or the prediction failed.
    """
    args = build_parser().parse_args(argv)

    settings = get_settings()
    configure_logging(json_logs=settings.LOG_JSON, level=settings.LOG_LEVEL)

    try:
        result = asyncio.run(_main(args))
    except PredictionError as exc:
        print(f"{exc.domain} prediction failed: {exc}", file=sys.stderr)
        return 1
    except ValidationError as exc:
        print(f"invalid {args.domain} input:\n{exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"cannot read input: {exc}", file=sys.stderr)
        return 1

    print(result.model_dump_json())
    return 0


if __name__ == "__main__":
    sys.exit(main())
