# ABOUTME: Exception taxonomy for the location-to-weather pipeline.
# ABOUTME: Geocoding and forecast failures surface as these; narrative failures never do.


class WeatherError(Exception):
    """Base class for failures the session shows to the user."""


class NotFoundError(WeatherError):
    """Raised when geocoding returns no match for the query."""


class ProviderError(WeatherError):
    """Raised when the forecast provider signals an error in its response body."""


class TransportError(WeatherError):
    """Raised on network, HTTP status, or response parsing failures."""
