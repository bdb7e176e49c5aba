"""Core scoring engines for quote trust reports and lead value."""

from .scorer import QuoteScorer, ScoreReport, score_quote
from .signals import QuoteSignals, SignalGroup, SignalParseError
from .lead_value import (
    LeadTier,
    ProjectSize,
    QualificationFactors,
    Urgency,
    ValueResult,
    calculate_lead_value,
)

__all__ = [
    "QuoteScorer",
    "ScoreReport",
    "score_quote",
    "QuoteSignals",
    "SignalGroup",
    "SignalParseError",
    "LeadTier",
    "ProjectSize",
    "QualificationFactors",
    "Urgency",
    "ValueResult",
    "calculate_lead_value",
]
