"""Tests for the quote signal contract."""

import pytest
from quote_scanner.core.signals import (
    QuoteSignals,
    SignalGroup,
    SignalParseError,
    get_signals_by_group,
    to_camel_case,
)


def base_payload(**overrides):
    """Provider-shaped payload with every field present."""
    data = QuoteSignals(is_valid_quote=True).to_dict()
    data.update(overrides)
    return data


class TestFromDict:
    """Tests for parsing provider output."""

    def test_parse_full_payload(self):
        """A complete provider response parses into signals."""
        signals = QuoteSignals.from_dict(base_payload(
            totalPriceFound=True,
            totalPriceValue=18230.5,
            openingCountEstimate=12,
            hasLaminatedMention=True,
            depositPercentage=30,
            hasContractTraps=True,
            contractTrapsList=["Arbitration", "Restocking fee"],
        ))
        assert signals.is_valid_quote is True
        assert signals.total_price_value == 18230.5
        assert signals.opening_count_estimate == 12
        assert signals.has_laminated_mention is True
        assert signals.contract_traps_list == ("Arbitration", "Restocking fee")

    def test_to_dict_restores_payload(self):
        """Serializing parsed signals gives back the provider shape."""
        payload = base_payload(hasPermitMention=True, warrantyDurationYears=2, contractTrapsList=["Venue"])
        assert QuoteSignals.from_dict(payload).to_dict() == payload

    def test_extra_keys_ignored(self):
        """Keys outside the contract are ignored."""
        signals = QuoteSignals.from_dict(base_payload(openingCountHint=10, notes="n/a"))
        assert signals.is_valid_quote

    def test_missing_boolean(self):
        """Every boolean signal is required."""
        payload = base_payload()
        del payload["hasLaminatedMention"]
        with pytest.raises(SignalParseError, match="hasLaminatedMention"):
            QuoteSignals.from_dict(payload)

    def test_boolean_must_be_bool(self):
        """String booleans are rejected."""
        with pytest.raises(SignalParseError, match="isValidQuote"):
            QuoteSignals.from_dict(base_payload(isValidQuote="true"))

    @pytest.mark.parametrize("value", [True, "1500", [1500], float("nan"), float("inf")])
    def test_bad_numbers(self, value):
        """Numerics must be finite numbers or null."""
        with pytest.raises(SignalParseError, match="totalPriceValue"):
            QuoteSignals.from_dict(base_payload(totalPriceValue=value))

    def test_opening_count_integral_float(self):
        """Whole-number floats become ints."""
        signals = QuoteSignals.from_dict(base_payload(openingCountEstimate=12.0))
        assert signals.opening_count_estimate == 12
        assert isinstance(signals.opening_count_estimate, int)

    def test_opening_count_fractional_kept(self):
        """Fractional counts are passed through to the scorer."""
        signals = QuoteSignals.from_dict(base_payload(openingCountEstimate=7.5))
        assert signals.opening_count_estimate == 7.5

    def test_missing_optional_fields(self):
        """Numerics, the reason and the trap list are optional."""
        payload = base_payload()
        for key in ("totalPriceValue", "depositPercentage", "validityReason", "contractTrapsList"):
            del payload[key]
        signals = QuoteSignals.from_dict(payload)
        assert signals.total_price_value is None
        assert signals.validity_reason == ""
        assert signals.contract_traps_list == ()

    def test_validity_reason_null(self):
        """A null reason becomes an empty string."""
        assert QuoteSignals.from_dict(base_payload(validityReason=None)).validity_reason == ""
        with pytest.raises(SignalParseError):
            QuoteSignals.from_dict(base_payload(validityReason=5))

    @pytest.mark.parametrize("value", ["Arbitration", [1, 2], {"a": 1}])
    def test_bad_trap_list(self, value):
        """Traps must be a list of strings."""
        with pytest.raises(SignalParseError, match="contractTrapsList"):
            QuoteSignals.from_dict(base_payload(contractTrapsList=value))

    def test_not_an_object(self):
        """Top-level arrays and strings are rejected."""
        with pytest.raises(SignalParseError):
            QuoteSignals.from_dict([])
        with pytest.raises(SignalParseError):
            QuoteSignals.from_dict("signals")

    def test_parse_error_is_value_error(self):
        """Callers can catch parse errors as ValueError."""
        assert issubclass(SignalParseError, ValueError)


class TestQuoteSignals:
    """Tests for the signal record itself."""

    def test_immutable(self):
        """Signals cannot be changed after creation."""
        signals = QuoteSignals(is_valid_quote=True)
        with pytest.raises(AttributeError):
            signals.is_valid_quote = False

    def test_trap_list_frozen(self):
        """A list argument is stored as a tuple and stays hashable."""
        signals = QuoteSignals(is_valid_quote=True, contract_traps_list=["Venue"])
        assert signals.contract_traps_list == ("Venue",)
        assert hash(signals) == hash(QuoteSignals(is_valid_quote=True, contract_traps_list=("Venue",)))

    def test_present_flags(self):
        """Only set boolean flags are listed."""
        signals = QuoteSignals(is_valid_quote=True, has_permit_mention=True, deposit_percentage=30)
        assert signals.present_flags == ["is_valid_quote", "has_permit_mention"]

    def test_to_camel_case(self):
        """Field names map to provider keys."""
        assert to_camel_case("has_laminated_mention") == "hasLaminatedMention"
        assert to_camel_case("is_valid_quote") == "isValidQuote"

    def test_signal_groups(self):
        """Signals are grouped by rubric phase."""
        warranty = get_signals_by_group(SignalGroup.WARRANTY)
        assert "has_labor_warranty" in warranty
        assert "has_permit_mention" not in warranty
        assert get_signals_by_group(SignalGroup.PREMIUM) == ["has_premium_indicators"]
