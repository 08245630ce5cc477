"""AI Agents package."""

from ledger.agents.advisor import (
    EMPTY_RESPONSE_MESSAGE,
    FALLBACK_MESSAGE,
    NarrativeAdvisor,
)

__all__ = [
    "EMPTY_RESPONSE_MESSAGE",
    "FALLBACK_MESSAGE",
    "NarrativeAdvisor",
]
