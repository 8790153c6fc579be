class PredictionError(Exception):
    """
    Base class for every failure raised by the prediction adapter.

    Attributes
    ----------
    domain : str
        Model domain the failing call belonged to ("digit", "sentiment",
        "survival" or "iris").
    """

    def __init__(self, message: str, domain: str) -> None:
        super().__init__(message)
        self.domain: str = domain


class TransportError(PredictionError):
    """
    The round trip itself failed.

    `status_code` holds the HTTP status for non-2xx responses and is `None`
    when no response was received at all (connection refused, reset, ...).
    """

    def __init__(self, message: str, domain: str, status_code: int | None) -> None:
        super().__init__(message, domain)
        self.status_code: int | None = status_code


class DecodeError(PredictionError):
    """The response body was not JSON, not an object, or lacked a field."""


class ResponseValueError(PredictionError, ValueError):
    """A response field was present but could not be coerced to its type."""


class ContractError(PredictionError):
    """The request cannot be expressed in the configured backend contract."""
