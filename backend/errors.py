"""
Plant recommender - error taxonomy.
Provider failures are recovered by the fallback ladder in recommend.py; only
configuration problems are meant to stop the process.
"""
from typing import Optional


class PlantRecommenderError(Exception):
    """Base class for all recommender errors."""


class ConfigurationError(PlantRecommenderError):
    """Missing or invalid provider credentials. Fatal at startup."""


class ProviderUnavailable(PlantRecommenderError):
    """Network/HTTP failure from the weather or plant catalog provider."""

    def __init__(self, provider: str, message: str, status_code: Optional[int] = None):
        self.provider = provider
        self.status_code = status_code
        detail = f"{provider}: {message}"
        if status_code is not None:
            detail += f" (HTTP {status_code})"
        super().__init__(detail)


class EmptyForecastError(ProviderUnavailable):
    """Forecast sample sequence was empty."""

    def __init__(self, provider: str = "forecast", message: str = "no forecast samples"):
        super().__init__(provider, message)


# Name used by the climate aggregator for the same condition
EmptyInputError = EmptyForecastError
