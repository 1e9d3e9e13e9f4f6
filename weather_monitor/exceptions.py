"""Error taxonomy surfaced at the HTTP boundary."""

from typing import Optional


class WeatherMonitorError(Exception):
    """Base class for application errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(WeatherMonitorError):
    """Raised when required configuration (e.g. the provider API key) is missing."""

    status_code = 500


class ProviderError(WeatherMonitorError):
    """Raised when the weather provider returns a non-success response.

    Attributes:
        provider_status: HTTP status returned by the provider, or None when
            the request never got a response (connection error, timeout).
        reason: Provider reason phrase or transport error description.
    """

    status_code = 502

    def __init__(self, provider_status: Optional[int], reason: str, label: str = "Weather API"):
        self.provider_status = provider_status
        self.reason = reason
        if provider_status is None:
            message = f"{label} Error: {reason}"
        else:
            message = f"{label} Error ({provider_status}): {reason}"
        super().__init__(message)


class FavoriteNotFoundError(WeatherMonitorError):
    """Raised when removing a favorite the visitor does not have."""

    status_code = 404

    def __init__(self, city_id: str):
        self.city_id = city_id
        super().__init__(f"Favorite city {city_id} not found")
