import functools

from pydantic_settings import BaseSettings, SettingsConfigDict

from mldemo.common.wire import DEFAULT_IMAGE_CONTRACT


class Settings(BaseSettings):
    """
    Central configuration for the mldemo prediction client.

    Values are populated from environment variables using the prefix
    `MLDEMO_`, or from a `.env` file when present.

    Examples
    --------
    - `MLDEMO_API_BASE_URL=https://models.example.org/api`
    - `MLDEMO_IMAGE_CONTRACT=v1`
    - `MLDEMO_LOG_LEVEL=DEBUG`

    Notes
    -----
    - Import and reuse `get_settings()` rather than instantiating this class
      directly.
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="MLDEMO_")

    # Origin shared by all four model endpoints (paths are appended to it)
    API_BASE_URL: str = "http://localhost:8000/api"

    # Digit backend contract revision (see mldemo.common.wire.IMAGE_CONTRACTS)
    IMAGE_CONTRACT: str = DEFAULT_IMAGE_CONTRACT

    # Seconds before a request is abandoned; None waits indefinitely
    REQUEST_TIMEOUT: float | None = None

    # Minimum log level (DEBUG, INFO, WARNING...)
    LOG_LEVEL: str = "INFO"

    # Emit logs in structured JSON format
    LOG_JSON: bool = True

    @classmethod
    def env(cls) -> "Settings":
        """
        Load and validate settings from environment variables.

        Returns
        -------
        Settings
            A validated Settings instance with all fields populated from
            environment variables or the defaults above.
        """
        return cls.model_validate({})


@functools.cache
def get_settings() -> Settings:
    """Return a process-wide cached `Settings` instance."""
    return Settings.env()
