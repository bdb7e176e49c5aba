"""Lead value classification for ad-platform optimization and sales routing.

Lead value matrix (homeowner = yes):

    | Project size | Timeline   | Value | Tier  |
    |--------------|------------|-------|-------|
    | Entire home  | ASAP       | $500  | whale |
    | Entire home  | 1-3 months | $300  | whale |
    | 11-15        | ASAP       | $200  | hot   |
    | 6-10         | ASAP       | $150  | hot   |
    | 11-15        | 1-3 months | $150  | hot   |
    | 6-10         | 1-3 months | $100  | warm  |
    | Any          | 3-6 months | $50   | warm  |
    | 1-5          | Any        | $25   | cold  |
    | Any          | Researching| $15   | cold  |

Non-homeowners are worth $0 (disqualified); unknown homeowner status is $10.
A completed SMS verification adds 20% on top for homeowners.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .numeric import round_half_up

SMS_VERIFIED_BONUS_RATE = 0.2


class ProjectSize(Enum):
    """Window/door count bucket from the funnel."""

    SMALL = "1-5"
    MEDIUM = "6-10"
    LARGE = "11-15"
    ENTIRE_HOME = "entire_home"


class Urgency(Enum):
    """Project timeline bucket from the funnel."""

    ASAP = "asap"
    NEAR_TERM = "1_3_months"
    MID_TERM = "3_6_months"
    RESEARCHING = "researching"


class LeadTier(Enum):
    """Coarse lead bucket, ordered from least to most valuable."""

    DISQUALIFIED = "disqualified"
    COLD = "cold"
    WARM = "warm"
    HOT = "hot"
    WHALE = "whale"

    @property
    def rank(self) -> int:
        return list(LeadTier).index(self)

    def __lt__(self, other):
        if not isinstance(other, LeadTier):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, LeadTier):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, LeadTier):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, LeadTier):
            return NotImplemented
        return self.rank >= other.rank


HOMEOWNER_ANSWERS = {
    "yes": True,
    "true": True,
    "no": False,
    "false": False,
    "unknown": None,
}


@dataclass(frozen=True)
class QualificationFactors:
    """The funnel answers that decide a lead's value."""

    is_homeowner: Optional[bool] = None
    project_size: Optional[ProjectSize] = None
    urgency: Optional[Urgency] = None
    sms_verified: bool = False

    @classmethod
    def from_answers(
        cls,
        is_homeowner: Any = None,
        window_count: Optional[str] = None,
        timeline: Optional[str] = None,
        sms_verified: bool = False,
    ) -> "QualificationFactors":
        """Build factors from raw funnel answers.

        Empty answers mean unknown. Raises ValueError for answers outside
        the funnel's option lists.
        """
        if isinstance(is_homeowner, str):
            answer = is_homeowner.strip().lower()
            if answer not in HOMEOWNER_ANSWERS:
                raise ValueError(
                    f"Invalid homeowner answer '{is_homeowner}'. "
                    f"Must be one of: {', '.join(sorted(HOMEOWNER_ANSWERS))}"
                )
            is_homeowner = HOMEOWNER_ANSWERS[answer]
        elif is_homeowner is not None and not isinstance(is_homeowner, bool):
            raise ValueError("Homeowner answer must be a boolean, string or null")

        return cls(
            is_homeowner=is_homeowner,
            project_size=_parse_choice(ProjectSize, window_count, "window count"),
            urgency=_parse_choice(Urgency, timeline, "timeline"),
            sms_verified=bool(sms_verified),
        )


@dataclass(frozen=True)
class ValueResult:
    """Monetary value and tier for one lead."""

    value: int
    tier: LeadTier
    reasoning: str

    @property
    def is_disqualified(self) -> bool:
        return self.tier == LeadTier.DISQUALIFIED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "tier": self.tier.value,
            "reasoning": self.reasoning,
        }


def calculate_lead_value(factors: QualificationFactors) -> ValueResult:
    """Calculate the monetary value of a lead. First matching rule wins."""
    if factors.is_homeowner is False:
        return ValueResult(
            value=0,
            tier=LeadTier.DISQUALIFIED,
            reasoning="Not a homeowner - cannot make purchasing decision",
        )

    if factors.is_homeowner is None:
        return ValueResult(
            value=10,
            tier=LeadTier.COLD,
            reasoning="Homeowner status unknown - needs qualification",
        )

    value, tier, reasoning = _classify_homeowner(factors.project_size, factors.urgency)

    if factors.sms_verified and value > 0:
        bonus = round_half_up(value * SMS_VERIFIED_BONUS_RATE)
        value += bonus
        reasoning += f" (+{bonus} SMS verified bonus)"

    return ValueResult(value=value, tier=tier, reasoning=reasoning)


def _classify_homeowner(size: Optional[ProjectSize], urgency: Optional[Urgency]):
    is_asap = urgency == Urgency.ASAP
    is_near_term = urgency == Urgency.NEAR_TERM
    is_mid_term = urgency == Urgency.MID_TERM
    is_researching = urgency in (Urgency.RESEARCHING, None)

    is_entire_home = size == ProjectSize.ENTIRE_HOME
    is_large = size == ProjectSize.LARGE
    is_medium = size == ProjectSize.MEDIUM
    is_small = size in (ProjectSize.SMALL, None)

    if is_entire_home and is_asap:
        return 500, LeadTier.WHALE, "Whale lead: Entire home project with immediate timeline"
    elif is_entire_home and is_near_term:
        return 300, LeadTier.WHALE, "Whale lead: Entire home project with near-term timeline"
    elif is_large and is_asap:
        return 200, LeadTier.HOT, "Hot lead: Large project (11-15 windows) with immediate timeline"
    elif is_medium and is_asap:
        return 150, LeadTier.HOT, "Hot lead: Medium project (6-10 windows) with immediate timeline"
    elif is_large and is_near_term:
        return 150, LeadTier.HOT, "Hot lead: Large project (11-15 windows) with near-term timeline"
    elif is_medium and is_near_term:
        return 100, LeadTier.WARM, "Warm lead: Medium project (6-10 windows) with near-term timeline"
    elif is_mid_term:
        return 50, LeadTier.WARM, "Warm lead: Homeowner with mid-term timeline (3-6 months)"
    elif is_small:
        return 25, LeadTier.COLD, "Cold lead: Small project (1-5 windows)"
    elif is_researching:
        return 15, LeadTier.COLD, "Cold lead: Still researching, no defined timeline"
    else:
        return 10, LeadTier.COLD, "Cold lead: Insufficient qualification data"


def _parse_choice(enum_cls, answer: Optional[str], label: str):
    if answer is None or (isinstance(answer, str) and not answer.strip()):
        return None
    if isinstance(answer, enum_cls):
        return answer
    try:
        return enum_cls(answer.strip())
    except (ValueError, AttributeError):
        options = ", ".join(e.value for e in enum_cls)
        raise ValueError(f"Invalid {label} '{answer}'. Must be one of: {options}")
