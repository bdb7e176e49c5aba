"""Quote scoring engine - turns extracted quote signals into a trust report."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .numeric import clamp, format_currency, round_half_up, round_to_step
from .signals import QuoteSignals

# Category weights in the overall score
SAFETY_WEIGHT = 0.30
SCOPE_WEIGHT = 0.25
PRICE_WEIGHT = 0.20
FINE_PRINT_WEIGHT = 0.15
WARRANTY_WEIGHT = 0.10

MAX_LIST_ITEMS = 6
PRICE_ROUNDING_STEP = 50
NOT_AVAILABLE = "N/A"

# === Messages (rendered to homeowners and persisted by callers) ===

INVALID_QUOTE_WARNING = "Not a window/door quote. Upload a contractor proposal/estimate for windows/doors."
INVALID_QUOTE_SUMMARY = "No grading performed because this is not a window/door quote."

TEMPERED_ONLY_WARNING = "Tempered alone isn't impact glass—verify laminated impact rating."
NON_IMPACT_WARNING = "Non-impact or glass-only language found—high hurricane compliance risk."
NO_COMPLIANCE_MISSING = "No proof of impact compliance (NOA/FL#, DP, HVHZ, or laminated impact glass)."

SUBJECT_TO_CHANGE_WARNING = "RED FLAG: 'Subject to remeasure/change' allows price hikes after signing."
WALL_REPAIR_MISSING = "Wall repair scope unclear (stucco/drywall/paint after install)."

HIGH_DEPOSIT_WARNING = "High risk: deposit exceeds 40%."
DEPOSIT_MISSING = "Payment schedule/deposit terms not clearly stated."
FINAL_PAYMENT_WARNING = "Risky: final payment due before inspection/permit close."

WARRANTY_MISSING = "No warranty terms stated (labor/workmanship + manufacturer coverage)."

PRICE_MISSING = "Could not compute price per opening (missing total price or opening count)."

SUMMARY_SAFETY = "Quote lacks impact compliance proof—verify NOA/FL approval and laminated glass before signing."
SUMMARY_FINE_PRINT = "Risky payment terms or contract traps detected—review deposit and final payment conditions."
SUMMARY_SCOPE = "Scope is vague—get written clarification on permits, installation details, and wall repairs."
SUMMARY_WARRANTY = "Warranty terms unclear or missing—request written labor and manufacturer warranty details."
SUMMARY_PRICE = "Price may be outside typical market range—compare with other quotes and verify scope."
SUMMARY_STRONG = "Quote appears comprehensive with good compliance documentation and fair terms."
SUMMARY_ACCEPTABLE = "Quote is acceptable but has some gaps—review warnings and missing items before signing."
SUMMARY_CONCERNS = "Quote has significant concerns—address warnings and missing items before proceeding."


@dataclass(frozen=True)
class ScoreReport:
    """Trust report for one quote document."""

    overall_score: int
    safety_score: int
    scope_score: int
    price_score: int
    fine_print_score: int
    warranty_score: int
    price_per_opening: str = NOT_AVAILABLE
    warnings: Tuple[str, ...] = ()
    missing_items: Tuple[str, ...] = ()
    summary: str = ""
    raw_signals: Optional[QuoteSignals] = field(default=None, compare=False, repr=False)

    @property
    def category_scores(self) -> Dict[str, int]:
        """Category scores in summary priority order."""
        return {
            "safety": self.safety_score,
            "fine_print": self.fine_print_score,
            "scope": self.scope_score,
            "warranty": self.warranty_score,
            "price": self.price_score,
        }

    @property
    def is_graded(self) -> bool:
        """False when the validity gate rejected the document."""
        return self.raw_signals is None or self.raw_signals.is_valid_quote

    @property
    def lowest_category(self) -> str:
        """Weakest category; ties go to the earlier one in priority order."""
        scores = self.category_scores
        return min(scores, key=scores.get)

    def to_dict(self, include_signals: bool = False) -> Dict:
        """Wire shape consumed by the funnel UI and the scans table."""
        data = {
            "overallScore": self.overall_score,
            "safetyScore": self.safety_score,
            "scopeScore": self.scope_score,
            "priceScore": self.price_score,
            "finePrintScore": self.fine_print_score,
            "warrantyScore": self.warranty_score,
            "pricePerOpening": self.price_per_opening,
            "warnings": list(self.warnings),
            "missingItems": list(self.missing_items),
            "summary": self.summary,
        }
        if include_signals and self.raw_signals is not None:
            data["rawSignals"] = self.raw_signals.to_dict()
        return data


class QuoteScorer:
    """Scores window/door quotes from extracted signals.

    Each category is built the same way: add points for evidence, pull the
    score down with caps for risk signals, then clamp to [0, 100]. Caps use
    min() so that when several apply the lowest one wins.
    """

    def score(self, signals: QuoteSignals, opening_count_hint: Optional[float] = None) -> ScoreReport:
        """Score a quote. Never raises for a well-formed QuoteSignals."""
        if not signals.is_valid_quote:
            return ScoreReport(
                overall_score=0,
                safety_score=0,
                scope_score=0,
                price_score=0,
                fine_print_score=0,
                warranty_score=0,
                price_per_opening=NOT_AVAILABLE,
                warnings=(INVALID_QUOTE_WARNING,),
                missing_items=(),
                summary=INVALID_QUOTE_SUMMARY,
                raw_signals=signals,
            )

        warnings: List[str] = []
        missing_items: List[str] = []

        price_per_opening = self.price_per_opening(signals, opening_count_hint)

        safety = self._score_safety(signals, warnings, missing_items)
        scope = self._score_scope(signals, warnings, missing_items)
        fine_print = self._score_fine_print(signals, warnings, missing_items)
        warranty = self._score_warranty(signals, missing_items)
        price = self._score_price(signals, price_per_opening, missing_items)

        overall = round_half_up(
            safety * SAFETY_WEIGHT
            + scope * SCOPE_WEIGHT
            + price * PRICE_WEIGHT
            + fine_print * FINE_PRINT_WEIGHT
            + warranty * WARRANTY_WEIGHT
        )

        return ScoreReport(
            overall_score=overall,
            safety_score=safety,
            scope_score=scope,
            price_score=price,
            fine_print_score=fine_print,
            warranty_score=warranty,
            price_per_opening=(
                format_currency(price_per_opening) if price_per_opening is not None else NOT_AVAILABLE
            ),
            warnings=tuple(warnings[:MAX_LIST_ITEMS]),
            missing_items=tuple(missing_items[:MAX_LIST_ITEMS]),
            summary=self.summarize(safety, scope, price, fine_print, warranty, overall),
            raw_signals=signals,
        )

    @staticmethod
    def price_per_opening(signals: QuoteSignals, opening_count_hint: Optional[float] = None) -> Optional[int]:
        """Total price divided by openings, rounded to the nearest $50.

        The document's own opening count wins over the homeowner's hint.
        """
        openings = signals.opening_count_estimate
        if openings is None:
            openings = opening_count_hint

        if not (signals.total_price_found and signals.total_price_value and openings and openings > 0):
            return None

        return round_to_step(signals.total_price_value / openings, PRICE_ROUNDING_STEP)

    def _score_safety(self, signals: QuoteSignals, warnings: List[str], missing_items: List[str]) -> int:
        score = 0
        if signals.has_compliance_keyword:
            score += 25
        if signals.has_compliance_identifier:
            score += 25
        if signals.has_laminated_mention:
            score += 25
        if signals.has_glass_build_detail:
            score += 10

        if signals.has_tempered_only_risk:
            score = min(score, 30)
            warnings.append(TEMPERED_ONLY_WARNING)

        if signals.has_non_impact_language:
            score = min(score, 25)
            warnings.append(NON_IMPACT_WARNING)

        if not (
            signals.has_compliance_keyword
            or signals.has_compliance_identifier
            or signals.has_laminated_mention
        ):
            score = min(score, 40)
            missing_items.append(NO_COMPLIANCE_MISSING)

        return clamp(score)

    def _score_scope(self, signals: QuoteSignals, warnings: List[str], missing_items: List[str]) -> int:
        score = 0
        if signals.has_permit_mention:
            score += 20
        if signals.has_demo_install_detail:
            score += 15
        if signals.has_specific_materials:
            score += 10
        if signals.has_wall_repair_mention:
            score += 15
        if signals.has_finish_detail:
            score += 10
        if signals.has_cleanup_mention:
            score += 15
        if signals.has_brand_clarity:
            score += 15

        if signals.has_subject_to_change:
            score = max(score - 30, 0)
            warnings.append(SUBJECT_TO_CHANGE_WARNING)

        # Reported only; does not move the score
        if signals.has_repairs_excluded or not signals.has_wall_repair_mention:
            missing_items.append(WALL_REPAIR_MISSING)

        return clamp(score)

    def _score_fine_print(self, signals: QuoteSignals, warnings: List[str], missing_items: List[str]) -> int:
        score = 60

        deposit = signals.deposit_percentage
        high_deposit = deposit is not None and deposit > 40
        if deposit is not None:
            if high_deposit:
                score = 0
                warnings.append(HIGH_DEPOSIT_WARNING)
            elif deposit >= 10:
                score = min(score + 20, 80)
            else:
                score = min(score + 40, 100)
        else:
            missing_items.append(DEPOSIT_MISSING)

        if signals.has_final_payment_trap:
            score = min(score, 25)
            warnings.append(FINAL_PAYMENT_WARNING)
        elif signals.has_safe_payment_terms and not high_deposit:
            # A deposit over 40% pins fine print at zero
            score = min(score + 10, 100)

        traps = signals.contract_traps_list
        if signals.has_contract_traps and traps:
            score = max(score - min(len(traps) * 10, 30), 0)
            warnings.append(f"Contract contains: {', '.join(traps[:3])}.")

        return clamp(score)

    def _score_warranty(self, signals: QuoteSignals, missing_items: List[str]) -> int:
        score = 0
        if signals.has_warranty_mention:
            score += 30
        if signals.has_labor_warranty:
            score += 40
        if signals.warranty_duration_years is not None and signals.warranty_duration_years > 1:
            score += 15
        if signals.has_lifetime_warranty:
            score += 15
        if signals.has_transferable_warranty:
            score += 10

        if not signals.has_warranty_mention:
            missing_items.append(WARRANTY_MISSING)

        return clamp(score)

    def _score_price(self, signals: QuoteSignals, price_per_opening: Optional[int], missing_items: List[str]) -> int:
        if price_per_opening is None:
            missing_items.append(PRICE_MISSING)
            return 40

        if price_per_opening < 1000:
            score = 40
        elif price_per_opening < 1200:
            score = 65
        elif price_per_opening <= 1800:
            # Mid-market fair pricing
            score = 95
        elif price_per_opening <= 2500:
            score = 75
        else:
            score = 55
            if signals.has_premium_indicators:
                score = min(score + 10, 75)

        return clamp(score)

    @staticmethod
    def summarize(safety: int, scope: int, price: int, fine_print: int, warranty: int, overall: int) -> str:
        """Pick the one-sentence summary.

        The weakest category speaks first; ties go to safety, fine print,
        scope, warranty, price in that order.
        """
        lowest = min(safety, scope, price, fine_print, warranty)

        if safety == lowest and safety < 50:
            return SUMMARY_SAFETY
        elif fine_print == lowest and fine_print < 50:
            return SUMMARY_FINE_PRINT
        elif scope == lowest and scope < 50:
            return SUMMARY_SCOPE
        elif warranty == lowest and warranty < 50:
            return SUMMARY_WARRANTY
        elif price == lowest and price < 60:
            return SUMMARY_PRICE
        elif overall >= 80:
            return SUMMARY_STRONG
        elif overall >= 60:
            return SUMMARY_ACCEPTABLE
        else:
            return SUMMARY_CONCERNS

    def explain_report(self, report: ScoreReport) -> str:
        """Get a detailed plain-text explanation of a report."""
        lines = [
            f"Overall Score: {report.overall_score}/100",
            f"Price per opening: {report.price_per_opening}",
            "",
            "Category Breakdown:",
            f"  Safety & code match ({int(SAFETY_WEIGHT * 100)}%): {report.safety_score}",
            f"  Install & scope clarity ({int(SCOPE_WEIGHT * 100)}%): {report.scope_score}",
            f"  Price fairness ({int(PRICE_WEIGHT * 100)}%): {report.price_score}",
            f"  Fine print ({int(FINE_PRINT_WEIGHT * 100)}%): {report.fine_print_score}",
            f"  Warranty ({int(WARRANTY_WEIGHT * 100)}%): {report.warranty_score}",
        ]

        lines.extend(["", "Warnings:"])
        if not report.warnings:
            lines.append("  (none)")
        for warning in report.warnings:
            lines.append(f"  ! {warning}")

        lines.extend(["", "Missing Items:"])
        if not report.missing_items:
            lines.append("  (none)")
        for item in report.missing_items:
            lines.append(f"  - {item}")

        lines.extend(["", report.summary])
        return "\n".join(lines)


def score_quote(signals: QuoteSignals, opening_count_hint: Optional[float] = None) -> ScoreReport:
    """Quick helper to score signals with a default scorer."""
    return QuoteScorer().score(signals, opening_count_hint)
