import pytest

from startup_valuation.core.errors import InvalidAmount
from startup_valuation.services.intents import (
    Intent,
    IntentKind,
    apply_intent,
    apply_intents,
    parse_intents,
)


def kinds(text):
    return [i.kind for i in parse_intents(text)]


class TestParsing:

    @pytest.mark.parametrize("text, expected", [
        ("make ARR 2Cr", 2e7),
        ("set arr to 15L", 1.5e6),
        ("arr 85k please", 85_000),
        ("Make arr 2,50,000", 250_000),
        ("make arr 2 crores", 2e7),
        ("set arr to 3 lakhs", 3e5),
        ("make arr 2cr.", 2e7),
        ("arr 1.5 crore, thanks", 1.5e7),
    ])
    def test_set_revenue(self, text, expected):
        [intent] = parse_intents(text)
        assert intent.kind is IntentKind.SET_REVENUE
        assert intent.value == pytest.approx(expected)

    def test_mrr_is_annualized(self):
        [intent] = parse_intents("set mrr to 5L")
        assert intent.value == pytest.approx(6e6)

    def test_malformed_revenue_raises(self):
        with pytest.raises(InvalidAmount):
            parse_intents("make arr 1.2.3")

    def test_percent_phrase_is_not_a_revenue_amount(self):
        assert kinds("arr 10% higher") == []

    @pytest.mark.parametrize("text", ["arr 1.5% higher please", "arr 2.25 % up", "arr 12.5%"])
    def test_decimal_percent_phrase_is_not_a_revenue_amount(self, text):
        assert kinds(text) == []

    @pytest.mark.parametrize("text, value", [
        ("use 9×", 9.0),
        ("use 7.5x instead", 7.5),
        ("set multiple to 12 x", 12.0),
    ])
    def test_set_multiple(self, text, value):
        [intent] = parse_intents(text)
        assert intent == Intent(IntentKind.SET_MULTIPLE, value=value)

    def test_zero_multiple_is_ignored(self):
        assert kinds("use 0x") == []

    def test_low_and_high(self):
        assert kinds("use low multiple") == [IntentKind.USE_LOW_MULTIPLE]
        assert kinds("Use High Multiple") == [IntentKind.USE_HIGH_MULTIPLE]

    @pytest.mark.parametrize("text, value, target", [
        ("+10% arr", 10.0, "revenue"),
        ("-20% multiple", -20.0, "multiple"),
        ("try 15% ARR", 15.0, "revenue"),
    ])
    def test_percent_delta(self, text, value, target):
        [intent] = parse_intents(text)
        assert intent == Intent(IntentKind.PERCENT_DELTA, value=value, target=target)

    @pytest.mark.parametrize("text", [
        "fetch latest multiples",
        "what are the latest SaaS revenue multiples?",
        "what's the market multiple now",
        "get fresh multiples",
    ])
    def test_fresh_market_data(self, text):
        assert IntentKind.FRESH_MARKET_DATA in kinds(text)

    def test_order_is_fixed_regardless_of_wording(self):
        assert kinds("fresh multiples, use 9x and make arr 2cr") == [
            IntentKind.SET_REVENUE,
            IntentKind.SET_MULTIPLE,
            IntentKind.FRESH_MARKET_DATA,
        ]

    def test_unrelated_text(self):
        assert parse_intents("how does this compare to last year?") == []


class TestApplying:

    def test_no_match_returns_snapshot_unchanged(self, snapshot):
        outcome = apply_intents(snapshot, "thanks, looks good")
        assert outcome.snapshot == snapshot
        assert outcome.intents == ()
        assert outcome.needs_fresh_market_data is False

    def test_revenue_and_multiple_both_apply(self, snapshot):
        outcome = apply_intents(snapshot, "make ARR 2Cr and use 9×")
        ms = outcome.snapshot.multiple_set
        assert outcome.snapshot.revenue == pytest.approx(2e7)
        assert ms.mid == 9.0
        assert ms.low == pytest.approx(7.2)
        assert ms.high == pytest.approx(10.8)

    def test_input_snapshot_is_not_modified(self, snapshot):
        before = snapshot.model_dump()
        apply_intents(snapshot, "make arr 2cr, use 9x, +10% multiple")
        assert snapshot.model_dump() == before

    def test_set_multiple_keeps_provenance_fields(self, snapshot):
        ms = apply_intents(snapshot, "use 9x").snapshot.multiple_set
        assert ms.as_of == "2025-05"
        assert ms.rationale == "Seed SaaS comps"

    def test_use_low_and_high_prefer_existing_band(self, snapshot):
        assert apply_intents(snapshot, "use low multiple").snapshot.multiple_set.mid == 8.5
        assert apply_intents(snapshot, "use high multiple").snapshot.multiple_set.mid == 12.0

    def test_use_low_and_high_fall_back_to_defaults(self, bare_snapshot):
        assert apply_intents(bare_snapshot, "use low multiple").snapshot.multiple_set.mid == pytest.approx(8.0)
        assert apply_intents(bare_snapshot, "use high multiple").snapshot.multiple_set.mid == pytest.approx(12.0)

    @pytest.mark.parametrize("text, expected", [
        ("make arr 2 crores", 2e7),
        ("set arr to 3 lakhs", 3e5),
        ("arr 1.5% higher please", 1e7),
    ])
    def test_revenue_wording_variants(self, snapshot, text, expected):
        assert apply_intents(snapshot, text).snapshot.revenue == pytest.approx(expected)

    def test_percent_revenue(self, snapshot):
        outcome = apply_intents(snapshot, "+10% arr")
        assert outcome.snapshot.revenue == pytest.approx(1.1e7)
        assert outcome.snapshot.multiple_set == snapshot.multiple_set

    def test_percent_multiple_synthesizes_missing_band(self, bare_snapshot):
        ms = apply_intents(bare_snapshot, "-20% multiple").snapshot.multiple_set
        assert ms.mid == pytest.approx(8.0)
        assert ms.low == pytest.approx(6.4)
        assert ms.high == pytest.approx(9.6)

    def test_percent_multiple_scales_existing_band(self, snapshot):
        ms = apply_intents(snapshot, "+10% multiple").snapshot.multiple_set
        assert (ms.low, ms.mid, ms.high) == pytest.approx((9.35, 11.0, 13.2))

    def test_fresh_request_only_sets_flag(self, snapshot):
        outcome = apply_intents(snapshot, "fetch latest multiples")
        assert outcome.needs_fresh_market_data is True
        assert outcome.snapshot == snapshot

    def test_bad_amount_aborts_every_mutation(self, snapshot):
        with pytest.raises(InvalidAmount):
            apply_intents(snapshot, "use 9x and make arr 1.2.3")

    def test_apply_intent_single_step(self, snapshot):
        updated = apply_intent(snapshot, Intent(IntentKind.SET_REVENUE, value=5e6))
        assert updated.revenue == 5e6
        assert snapshot.revenue == 1e7
