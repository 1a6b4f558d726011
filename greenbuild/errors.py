"""Exception hierarchy for GreenBuild.

Engine-layer errors (:class:`ConfigurationError`,
:class:`CatalogIntegrityError`) propagate to the request boundary.
Recommendation and provider errors are raised internally and absorbed by
the orchestrator into a ``RecommendationUnavailable`` value.
"""

from __future__ import annotations


class GreenBuildError(Exception):
    """Base class for all GreenBuild errors."""


class ConfigurationError(GreenBuildError):
    """A building type has no ratio table and no default is configured."""


class CatalogIntegrityError(GreenBuildError):
    """A required or substitution material is missing from the catalog."""

    def __init__(self, material: str, message: str | None = None) -> None:
        self.material = material
        super().__init__(message or f"Material missing from catalog: {material!r}")


# ---------------------------------------------------------------------------
# Recommendation failures (never escape the orchestrator)
# ---------------------------------------------------------------------------

class RecommendationError(GreenBuildError):
    """Base for failures while turning a model response into a result."""


class ResponseParseError(RecommendationError):
    """The raw response contained no parseable JSON object."""


class ResponseValidationError(RecommendationError):
    """The parsed payload did not conform to the recommendation schema."""


# ---------------------------------------------------------------------------
# Provider failures
# ---------------------------------------------------------------------------

class ProviderError(GreenBuildError):
    """Base for failures reported by a generative model provider."""


class TransientProviderError(ProviderError):
    """Network error, timeout or non-2xx response.  Worth retrying."""

    def __init__(self, message: str, *, status: int | None = None, timeout: bool = False) -> None:
        self.status = status
        self.timeout = timeout
        super().__init__(message)


class RateLimitedError(TransientProviderError):
    """HTTP 429 or an equivalent quota signal."""

    def __init__(self, message: str = "Rate limited by model provider") -> None:
        super().__init__(message, status=429)


class PermanentProviderError(ProviderError):
    """Provider cannot serve requests at all (e.g. not configured)."""
