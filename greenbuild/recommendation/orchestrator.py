"""RecommendationOrchestrator — grounded, validated model suggestions.

Usage::

    from greenbuild.recommendation import RecommendationOrchestrator
    from greenbuild.providers import OllamaProvider

    orchestrator = RecommendationOrchestrator(OllamaProvider())
    outcome = orchestrator.recommend(spec, bill, catalog)
    if outcome.available:
        ...

``recommend`` never raises for provider, parse or schema failures: after
all attempts are spent it returns :class:`RecommendationUnavailable`.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from greenbuild.catalog.models import MaterialCatalog
from greenbuild.engine.models import BillOfMaterials, BuildingSpec
from greenbuild.errors import (
    PermanentProviderError,
    RateLimitedError,
    ResponseParseError,
    ResponseValidationError,
    TransientProviderError,
)
from greenbuild.providers.base import GenerativeModelProvider
from greenbuild.recommendation.models import (
    FailureKind,
    RecommendationResult,
    RecommendationUnavailable,
)
from greenbuild.recommendation.parsing import parse_recommendation
from greenbuild.recommendation.prompts import build_recommendation_prompt, recommendation_schema

logger = logging.getLogger(__name__)

# One initial call plus one retry
MAX_ATTEMPTS = 2

# Fixed delay before the retry, seconds
RETRY_BACKOFF_SECONDS = 1.5

# Default bound on a single outbound call, seconds
DEFAULT_TIMEOUT = 30.0

Outcome = RecommendationResult | RecommendationUnavailable


class RecommendationOrchestrator:
    """Turns a bill of materials into model-generated optimization advice.

    Parameters
    ----------
    provider:
        The external generative model.
    max_attempts:
        Attempt ceiling including the first call.
    backoff_seconds:
        Delay between attempts.
    timeout:
        Per-call timeout handed to the provider.
    sleep:
        Delay function; injectable so tests do not wait.
    """

    def __init__(
        self,
        provider: GenerativeModelProvider,
        *,
        max_attempts: int = MAX_ATTEMPTS,
        backoff_seconds: float = RETRY_BACKOFF_SECONDS,
        timeout: float = DEFAULT_TIMEOUT,
        sleep: Callable[[float], Any] = time.sleep,
    ) -> None:
        self.provider = provider
        self.max_attempts = max(1, max_attempts)
        self.backoff_seconds = backoff_seconds
        self.timeout = timeout
        self._sleep = sleep

    def recommend(
        self,
        spec: BuildingSpec,
        bill: BillOfMaterials,
        catalog: MaterialCatalog,
    ) -> Outcome:
        """Return validated suggestions, or ``RecommendationUnavailable``."""
        prompt = build_recommendation_prompt(spec, bill, catalog)
        schema = recommendation_schema()
        logger.debug("Recommendation prompt built (%d chars)", len(prompt))

        failures: list[FailureKind] = []
        reason = ""
        attempt = 0
        while attempt < self.max_attempts:
            attempt += 1
            outcome = self._attempt(prompt, schema)
            if isinstance(outcome, RecommendationResult):
                logger.info(
                    "Recommendation received on attempt %d (%d optimizations)",
                    attempt, len(outcome.optimizations),
                )
                return outcome

            kind, reason = outcome
            failures.append(kind)
            logger.warning(
                "Recommendation attempt %d/%d failed (%s): %s",
                attempt, self.max_attempts, kind.value, reason,
            )
            if not kind.transient:
                break
            if attempt < self.max_attempts:
                self._sleep(self.backoff_seconds)

        logger.warning("Recommendation unavailable after %d attempt(s)", attempt)
        return RecommendationUnavailable(reason=reason, attempts=attempt, failures=failures)

    def _attempt(
        self,
        prompt: str,
        schema: dict[str, Any],
    ) -> RecommendationResult | tuple[FailureKind, str]:
        """Run one call-and-parse cycle.

        Returns the validated result, or ``(kind, reason)`` for a failure.
        """
        try:
            raw = self.provider.generate(prompt, schema=schema, timeout=self.timeout)
        except RateLimitedError as exc:
            return FailureKind.RATE_LIMITED, str(exc)
        except TransientProviderError as exc:
            if exc.timeout:
                return FailureKind.TIMEOUT, str(exc)
            if exc.status is not None:
                return FailureKind.HTTP_STATUS, str(exc)
            return FailureKind.NETWORK, str(exc)
        except PermanentProviderError as exc:
            return FailureKind.PERMANENT, str(exc)
        except Exception as exc:
            # Unmapped provider failure; must not take down the analysis.
            logger.debug("Unexpected provider error", exc_info=True)
            return FailureKind.NETWORK, f"{type(exc).__name__}: {exc}"

        try:
            return parse_recommendation(raw)
        except ResponseParseError as exc:
            logger.debug("Unparseable model output: %s", (raw or "")[:200])
            return FailureKind.PARSE, str(exc)
        except ResponseValidationError as exc:
            return FailureKind.VALIDATION, str(exc)
        except Exception as exc:
            # Untrusted payload tripped something below the parser
            logger.debug("Unexpected error parsing model output", exc_info=True)
            return FailureKind.PARSE, f"{type(exc).__name__}: {exc}"
