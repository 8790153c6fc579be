import json
import logging
import time
from collections.abc import Callable
from typing import Any, Self, TypeVar

import httpx

from mldemo.client import normalize, shaping
from mldemo.client.config import Settings
from mldemo.client.metrics import MetricsManager
from mldemo.common.errors import (
    ContractError,
    DecodeError,
    PredictionError,
    TransportError,
)
from mldemo.common.schemas import (
    ImageInferenceRequest,
    ImageInferenceResponse,
    IrisRequest,
    IrisResult,
    SentimentRequest,
    SentimentResult,
    SurvivalRequest,
    SurvivalResult,
)
from mldemo.common.wire import (
    DEFAULT_IMAGE_CONTRACT,
    DIGIT_PATH,
    IMAGE_CONTRACTS,
    IRIS_PATH,
    SENTIMENT_PATH,
    SURVIVAL_PATH,
    ImageContract,
)

T = TypeVar("T")

logger = logging.getLogger("mldemo.client")


class PredictionClient:
    """
    Async adapter in front of the four model backends.

    Each `predict_*` coroutine shapes the domain request into the wire body
    its backend expects, POSTs it as JSON to a fixed path under the shared
    base URL, and normalizes the reply into a typed result. Calls are
    independent round trips: nothing is retried, cached or batched, and no
    timeout is applied unless one is configured.

    Examples
    --------
    >>> async with PredictionClient("http://localhost:8000/api") as client:
    ...     result = await client.predict_iris(
    ...         IrisRequest(sepal_length=5.1, sepal_width=3.5,
    ...                     petal_length=1.4, petal_width=0.2)
    ...     )
    >>> result.prediction
    'setosa'
    """

    def __init__(
        self,
        url: str,
        image_contract: str = DEFAULT_IMAGE_CONTRACT,
        timeout: float | None = None,
        metrics: MetricsManager | None = None,
        _client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize a new prediction client.

        Parameters
        ----------
        url : str
            Base URL shared by all model endpoints. A trailing slash is
            ignored.
        image_contract : str
            Version of the digit backend's request contract, a key of
            `IMAGE_CONTRACTS`.
        timeout : float | None
            Per-request timeout in seconds. `None` waits indefinitely.
        metrics : MetricsManager | None
            Optional Prometheus metrics to record calls on.
        _client : httpx.AsyncClient | None
            Optional underlying httpx client. A client passed in here is
            left open by `aclose()`.

        Raises
        ------
        ContractError
            If `image_contract` names an unknown contract version.
        """
        contract = IMAGE_CONTRACTS.get(image_contract)

        if contract is None:
            raise ContractError(f"unknown image contract {image_contract!r}", "digit")

        self._image_contract: ImageContract = contract
        self._url: str = url.rstrip("/")
        self._metrics: MetricsManager | None = metrics
        self._owns_client: bool = _client is None
        self._client: httpx.AsyncClient = _client or httpx.AsyncClient(
            timeout=timeout
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, metrics: MetricsManager | None = None
    ) -> Self:
        return cls(
            settings.API_BASE_URL,
            image_contract=settings.IMAGE_CONTRACT,
            timeout=settings.REQUEST_TIMEOUT,
            metrics=metrics,
        )

    @property
    def image_contract(self) -> ImageContract:
        return self._image_contract

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def predict_digit(
        self, request: ImageInferenceRequest
    ) -> ImageInferenceResponse:
        """
        Classify a handwritten digit.

        Returns
        -------
        ImageInferenceResponse
            The predicted class; confidence is a 1.0 placeholder.
        """
        payload = shaping.shape_digit(request, self._image_contract)
        return await self._predict("digit", DIGIT_PATH, payload, normalize.normalize_digit)

    async def predict_sentiment(self, request: SentimentRequest) -> SentimentResult:
        """Score a review; the label is derived from the model probability."""
        payload = shaping.shape_sentiment(request)
        return await self._predict(
            "sentiment", SENTIMENT_PATH, payload, normalize.normalize_sentiment
        )

    async def predict_survival(self, request: SurvivalRequest) -> SurvivalResult:
        """
        Predict whether a passenger survived.

        Returns
        -------
        SurvivalResult
            The outcome; probability is a placeholder (0.75 or 0.25) tagged
            `Provenance.PLACEHOLDER`.
        """
        payload = shaping.shape_survival(request)
        return await self._predict(
            "survival", SURVIVAL_PATH, payload, normalize.normalize_survival
        )

    async def predict_iris(self, request: IrisRequest) -> IrisResult:
        payload = shaping.shape_iris(request)
        return await self._predict("iris", IRIS_PATH, payload, normalize.normalize_iris)

    async def _predict(
        self,
        domain: str,
        path: str,
        payload: dict[str, Any],
        normalizer: Callable[[Any], T],
    ) -> T:
        start: float = time.perf_counter()

        try:
            body = await self._request(domain, path, payload)
            result = normalizer(body)
        except PredictionError as exc:
            self._record(domain, type(exc).__name__, start)
            logger.warning(
                "prediction failed",
                extra={
                    "domain": domain,
                    "path": path,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            raise

        duration_sec = self._record(domain, "ok", start)
        logger.info(
            "prediction",
            extra={
                "domain": domain,
                "path": path,
                "duration_ms": round(duration_sec * 1000, 2),
            },
        )
        return result

    def _record(self, domain: str, outcome: str, start: float) -> float:
        duration_sec = time.perf_counter() - start

        if self._metrics is not None:
            self._metrics.predictions.labels(domain=domain, outcome=outcome).inc()
            self._metrics.latency.labels(domain=domain).observe(duration_sec)

        return duration_sec

    async def _request(self, domain: str, path: str, payload: dict[str, Any]) -> Any:
        """
        POST `payload` as JSON and decode the JSON reply.

        Raises
        ------
        TransportError
            On a non-2xx status (carrying it) or when no response arrived.
        DecodeError
            If the reply body is not valid JSON.
        """
        content = json.dumps(payload).encode()
        headers = {"Content-Type": "application/json"}

        try:
            response = await self._client.post(
                f"{self._url}{path}", headers=headers, content=content
            )
        except httpx.TransportError as exc:
            raise TransportError(f"request to {path} failed: {exc}", domain, None) from exc

        logger.debug(
            "response",
            extra={"domain": domain, "path": path, "status": response.status_code},
        )

        if not response.is_success:
            raise TransportError(
                f"HTTP error! status: {response.status_code}",
                domain,
                response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError(f"{domain} response is not JSON", domain) from exc
