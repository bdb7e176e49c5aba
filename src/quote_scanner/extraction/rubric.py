"""Extraction rubric - the instructions a vision model follows to read a quote.

The model only extracts signals; all judgment happens in the scoring engine.
"""

from dataclasses import fields
from typing import Optional

from ..core.signals import NUMERIC_FIELDS, QuoteSignals, to_camel_case

EXTRACTION_RUBRIC = """
You are WINDOW QUOTE SIGNAL EXTRACTOR, an evidence-based reader for Florida impact-window/door quotes.

Your ONLY job is to EXTRACT what you see in the document. You do NOT score or judge.

Return ONLY a JSON object with boolean flags and extracted values based on what you observe.

PHASE 0 - DOCUMENT VALIDITY CHECK
Determine if this is a real window/door quote/proposal/contract.
VALID if you see ANY TWO OR MORE:
- Terms: window, door, slider, glazing, impact, hurricane, laminated, vinyl, aluminum, frame
- Line items with qty/dimensions/opening descriptions
- A total price / estimate amount
- Contractor company info / license / address
- "proposal", "estimate", "contract", "quote", "scope of work"
Set isValidQuote = true/false based on this check.
If not valid, set validityReason explaining why (e.g., "This appears to be a receipt, not a quote").

PHASE 1 - EXTRACT PRICE & OPENINGS
A) TOTAL PRICE: look for "Total", "Grand Total", "Contract Price", "Total Due", "$".
   Set totalPriceFound = true if you find a clear total and totalPriceValue = the numeric value.
B) OPENING COUNT: count line items for windows/doors/openings.
   Set openingCountEstimate = your best estimate (integer), or null if unclear.

PHASE 2 - SAFETY SIGNALS
A) hasComplianceKeyword: NOA, Notice of Acceptance, Miami-Dade, MDCA, FL#, Florida Product Approval,
   HVHZ, High Velocity Hurricane Zone, TAS 201/202/203, ASTM E1886/E1996, DP, Design Pressure, +/-
B) hasComplianceIdentifier: a number after NOA/FL (ex: "NOA 20-1234", "FL 16824"), or a DP or +/- value
   (ex: "DP50", "+55/-65")
C) hasLaminatedMention: laminated, impact laminated, PVB, interlayer, SGP, SentryGlas, ionoplast
D) hasGlassBuildDetail: thickness (5/16, 7/16, 9/16), IGU, insulated laminated, argon, Low-E,
   heat strengthened (only with laminated/impact context)
E) hasTemperedOnlyRisk: "tempered" appears AND NO laminated/impact language
   hasNonImpactLanguage: "non-impact", "not impact", "annealed", or "glass-only replacement"

PHASE 3 - SCOPE SIGNALS
A) hasPermitMention: permit, permitting, engineering, engineer letter, drawings, notice of commencement,
   NOC, inspections
B) hasDemoInstallDetail: remove existing, demo, dispose old windows, install new, anchor, fasten,
   bucking, shimming, waterproofing, flashing
C) hasSpecificMaterials: sealant, caulk, silicone, polyurethane, flashing tape, sill pan, tapcons,
   stainless fasteners
D) hasWallRepairMention: stucco, drywall, plaster, patch, texture, paint, match existing
E) hasFinishDetail: trim, casing, wrap, interior trim, exterior trim
F) hasCleanupMention: debris, haul away, dumpster, cleanup, floor protection, dust barrier
G) hasBrandClarity: brand names (PGT, CGI, ES, WinDoor, Andersen, Marvin, Euro-Wall) or window types
   (SH/DH/casement/awning/fixed/slider/French door)
H) hasSubjectToChange: "subject to remeasure", "subject to change", "price may change"
   hasRepairsExcluded: "stucco by owner", "drywall not included", or repairs explicitly excluded

PHASE 4 - FINE PRINT SIGNALS
A) depositPercentage: numeric value (e.g., 50 for 50%), else null. If only a deposit amount is shown,
   calculate it from the total.
B) hasFinalPaymentTrap: final payment due BEFORE inspection/permit close/completion
   hasSafePaymentTerms: final payment due AFTER inspection/permit close/walkthrough
C) hasContractTraps: cancellation fee, restocking, "non-refundable", arbitration, venue, attorney fees
   contractTrapsList: array of the specific traps found

PHASE 5 - WARRANTY SIGNALS
- hasWarrantyMention: warranty, guaranteed, workmanship, labor, manufacturer warranty
- hasLaborWarranty: labor/workmanship explicitly mentioned
- warrantyDurationYears: numeric value if stated (e.g., 2 for "2-year warranty"), else null
- hasLifetimeWarranty: "lifetime" in warranty context
- hasTransferableWarranty: "transferable" mentioned

PHASE 6 - PREMIUM INDICATORS
- hasPremiumIndicators: Euro-Wall, Marvin, large sliders, custom colors, SGP, very high DP (>50),
  coastal stainless package

OUTPUT
Return ONLY the JSON object with all the boolean flags and extracted values. Do NOT include scores.
"""


def _build_response_schema() -> dict:
    """JSON schema for structured model output, derived from QuoteSignals."""
    properties = {}
    required = []
    for f in fields(QuoteSignals):
        key = to_camel_case(f.name)
        if f.name in NUMERIC_FIELDS:
            properties[key] = {"type": "number", "nullable": True}
        elif f.name == "validity_reason":
            properties[key] = {"type": "string"}
            required.append(key)
        elif f.name == "contract_traps_list":
            properties[key] = {"type": "array", "items": {"type": "string"}}
            required.append(key)
        else:
            properties[key] = {"type": "boolean"}
            required.append(key)
    return {"type": "object", "properties": properties, "required": required}


SIGNALS_RESPONSE_SCHEMA = _build_response_schema()


def build_user_prompt(opening_count_hint: Optional[float] = None, area_name: Optional[str] = None) -> str:
    """Build the per-document prompt, including homeowner hints when known."""
    prompt = (
        "Extract evidence signals from the following window/door quote image.\n\n"
        "If the image is not a window/door quote, set isValidQuote to false and "
        "explain why in validityReason.\n\n---\n"
    )

    if opening_count_hint:
        prompt += f"\nHINT: The homeowner says there are approximately {opening_count_hint} openings."

    if area_name:
        prompt += f"\nHINT: The project is in {area_name}, Florida."

    prompt += (
        "\n\nExtract all evidence signals from the quote according to the extraction "
        "rubric and return your findings as a JSON object."
    )
    return prompt
