"""Quote signals - the facts a document-understanding provider extracts from one quote."""

import math
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class SignalParseError(ValueError):
    """Provider output could not be turned into QuoteSignals."""


class SignalGroup(Enum):
    """Rubric phase each signal belongs to."""

    VALIDITY = "validity"
    PRICE = "price"
    SAFETY = "safety"
    SCOPE = "scope"
    FINE_PRINT = "fine_print"
    WARRANTY = "warranty"
    PREMIUM = "premium"


@dataclass(frozen=True)
class QuoteSignals:
    """Signals extracted from a single window/door quote.

    Field names mirror the provider's camelCase JSON keys
    (``has_laminated_mention`` <-> ``hasLaminatedMention``).
    """

    # Validity gate
    is_valid_quote: bool
    validity_reason: str = ""

    # Price & openings
    total_price_found: bool = False
    total_price_value: Optional[float] = None
    opening_count_estimate: Optional[int] = None

    # Safety
    has_compliance_keyword: bool = False  # NOA, FL#, HVHZ, DP
    has_compliance_identifier: bool = False  # "NOA 20-1234", "+55/-65"
    has_laminated_mention: bool = False
    has_glass_build_detail: bool = False
    has_tempered_only_risk: bool = False
    has_non_impact_language: bool = False

    # Scope
    has_permit_mention: bool = False
    has_demo_install_detail: bool = False
    has_specific_materials: bool = False
    has_wall_repair_mention: bool = False
    has_finish_detail: bool = False
    has_cleanup_mention: bool = False
    has_brand_clarity: bool = False
    has_subject_to_change: bool = False
    has_repairs_excluded: bool = False

    # Fine print
    deposit_percentage: Optional[float] = None
    has_final_payment_trap: bool = False
    has_safe_payment_terms: bool = False
    has_contract_traps: bool = False
    contract_traps_list: Tuple[str, ...] = field(default_factory=tuple)

    # Warranty
    has_warranty_mention: bool = False
    has_labor_warranty: bool = False
    warranty_duration_years: Optional[float] = None
    has_lifetime_warranty: bool = False
    has_transferable_warranty: bool = False

    # Premium
    has_premium_indicators: bool = False

    def __post_init__(self):
        """Freeze the trap list so the record stays hashable."""
        if not isinstance(self.contract_traps_list, tuple):
            object.__setattr__(self, "contract_traps_list", tuple(self.contract_traps_list))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuoteSignals":
        """Build signals from a provider response.

        Raises SignalParseError when the payload does not match the contract.
        """
        if not isinstance(data, dict):
            raise SignalParseError(f"Expected a JSON object, got {type(data).__name__}")

        values: Dict[str, Any] = {}
        for f in fields(cls):
            key = to_camel_case(f.name)

            if f.name in NUMERIC_FIELDS:
                values[f.name] = _parse_number(key, data.get(key), integer=f.name == "opening_count_estimate")
            elif f.name == "validity_reason":
                reason = data.get(key)
                if reason is not None and not isinstance(reason, str):
                    raise SignalParseError(f"{key} must be a string")
                values[f.name] = reason or ""
            elif f.name == "contract_traps_list":
                values[f.name] = _parse_traps(key, data.get(key))
            else:
                if key not in data:
                    raise SignalParseError(f"Missing required signal: {key}")
                if not isinstance(data[key], bool):
                    raise SignalParseError(f"{key} must be a boolean")
                values[f.name] = data[key]

        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the provider's camelCase shape."""
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "contract_traps_list":
                value = list(value)
            data[to_camel_case(f.name)] = value
        return data

    @property
    def present_flags(self) -> List[str]:
        """Names of all boolean signals that are set."""
        return [
            f.name for f in fields(self)
            if f.name in SIGNAL_GROUPS and getattr(self, f.name) is True
        ]


NUMERIC_FIELDS = {
    "total_price_value",
    "opening_count_estimate",
    "deposit_percentage",
    "warranty_duration_years",
}

SIGNAL_GROUPS: Dict[str, SignalGroup] = {
    "is_valid_quote": SignalGroup.VALIDITY,
    "total_price_found": SignalGroup.PRICE,
    "has_compliance_keyword": SignalGroup.SAFETY,
    "has_compliance_identifier": SignalGroup.SAFETY,
    "has_laminated_mention": SignalGroup.SAFETY,
    "has_glass_build_detail": SignalGroup.SAFETY,
    "has_tempered_only_risk": SignalGroup.SAFETY,
    "has_non_impact_language": SignalGroup.SAFETY,
    "has_permit_mention": SignalGroup.SCOPE,
    "has_demo_install_detail": SignalGroup.SCOPE,
    "has_specific_materials": SignalGroup.SCOPE,
    "has_wall_repair_mention": SignalGroup.SCOPE,
    "has_finish_detail": SignalGroup.SCOPE,
    "has_cleanup_mention": SignalGroup.SCOPE,
    "has_brand_clarity": SignalGroup.SCOPE,
    "has_subject_to_change": SignalGroup.SCOPE,
    "has_repairs_excluded": SignalGroup.SCOPE,
    "has_final_payment_trap": SignalGroup.FINE_PRINT,
    "has_safe_payment_terms": SignalGroup.FINE_PRINT,
    "has_contract_traps": SignalGroup.FINE_PRINT,
    "has_warranty_mention": SignalGroup.WARRANTY,
    "has_labor_warranty": SignalGroup.WARRANTY,
    "has_lifetime_warranty": SignalGroup.WARRANTY,
    "has_transferable_warranty": SignalGroup.WARRANTY,
    "has_premium_indicators": SignalGroup.PREMIUM,
}


def to_camel_case(name: str) -> str:
    """has_laminated_mention -> hasLaminatedMention."""
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def get_signals_by_group(group: SignalGroup) -> List[str]:
    """Get all boolean signal names in a rubric group."""
    return [name for name, g in SIGNAL_GROUPS.items() if g == group]


def _parse_number(key: str, value: Any, integer: bool = False):
    if value is None:
        return None
    # bool is an int subclass; a provider sending true here is malformed
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SignalParseError(f"{key} must be a number or null")
    if not math.isfinite(value):
        raise SignalParseError(f"{key} must be finite")
    if integer and float(value).is_integer():
        return int(value)
    return value


def _parse_traps(key: str, value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise SignalParseError(f"{key} must be a list of strings")
    return tuple(value)
