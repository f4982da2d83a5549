"""Unit tests for the AllocationEngine domain service."""

from collections import Counter

import pytest

from bundle_pricing.domain.model.bundle_rule import BundleRule, CategoryRequirement
from bundle_pricing.domain.model.cart import CartLine
from bundle_pricing.domain.model.pricing import PricingResult
from bundle_pricing.domain.model.value_objects import Money
from bundle_pricing.domain.service.allocation_engine import AllocationEngine
from tests.fakes import product, rule


def _cart(*specs):
    """Build (lines, catalog) from (pid, category, price, qty) tuples."""
    lines = []
    catalog = {}
    for pid, category, price, qty in specs:
        catalog[pid] = product(pid, category, price)
        lines.append(CartLine.of(pid, qty))
    return lines, catalog


def _scenario_a():
    return _cart(
        ("1", "Áo", "100000", 1),
        ("2", "Áo", "150000", 1),
        ("3", "Áo", "120000", 1),
        ("4", "Mũ", "80000", 1),
        ("5", "Mũ", "90000", 1),
    )


def _assert_reconciles(result: PricingResult) -> None:
    assert result.original_total == result.final_total + result.total_savings
    assert result.final_total == result.bundles_total + result.remaining_total
    assert result.final_total <= result.original_total


def _assert_conserves(result: PricingResult, lines) -> None:
    expected = Counter()
    for line in lines:
        expected[line.product_id] += line.quantity.value
    actual = Counter()
    for line in result.expand():
        actual[line.product_id] += line.quantity
    assert actual == expected


# ── Scenarios ────────────────────────────────────────────────────────────────


class TestSingleBeneficialBundle:

    def test_scenario_a_totals(self):
        lines, catalog = _scenario_a()
        result = AllocationEngine().allocate(lines, catalog, [rule("1", "200000", ("Áo", 2), ("Mũ", 1))])

        assert result.original_total == Money.of("540000")
        assert result.final_total == Money.of("380000")
        assert result.total_savings == Money.of("160000")
        _assert_reconciles(result)

    def test_scenario_a_bundle_breakdown(self):
        lines, catalog = _scenario_a()
        result = AllocationEngine().allocate(lines, catalog, [rule("1", "200000", ("Áo", 2), ("Mũ", 1))])

        assert len(result.applied_bundles) == 1
        bundle = result.applied_bundles[0]
        assert bundle.applications == 1
        assert [(i.product_id, i.unit_price, i.quantity) for i in bundle.items_consumed] == [
            ("2", Money.of("150000"), 1),
            ("3", Money.of("120000"), 1),
            ("5", Money.of("90000"), 1),
        ]
        assert bundle.total_charged == Money.of("200000")
        assert bundle.savings == Money.of("160000")
        assert bundle.consumed_value == Money.of("360000")

    def test_scenario_a_remaining_items(self):
        lines, catalog = _scenario_a()
        result = AllocationEngine().allocate(lines, catalog, [rule("1", "200000", ("Áo", 2), ("Mũ", 1))])

        assert [(i.product_id, i.subtotal) for i in result.remaining_items] == [
            ("1", Money.of("100000")),
            ("4", Money.of("80000")),
        ]
        assert result.remaining_total == Money.of("180000")


class TestNoApplicableBundle:

    def test_rule_for_missing_category_excluded(self):
        lines, catalog = _cart(("1", "Áo", "100000", 2), ("2", "Áo", "150000", 1))
        result = AllocationEngine().allocate(lines, catalog, [rule("1", "50000", ("Mũ", 1))])

        assert result.applied_bundles == ()
        assert result.final_total == Money.of("350000")
        assert result.total_savings == Money.zero()

    def test_unprofitable_rule_excluded(self):
        lines, catalog = _cart(("1", "Áo", "100000", 2))
        result = AllocationEngine().allocate(lines, catalog, [rule("1", "200000", ("Áo", 2))])

        assert result.applied_bundles == ()
        assert result.final_total == result.original_total

    def test_no_rules_is_identity(self):
        lines, catalog = _scenario_a()
        result = AllocationEngine().allocate(lines, catalog, [])

        assert result.final_total == result.original_total
        assert result.applied_bundles == ()
        assert len(result.remaining_items) == 5

    def test_inactive_rule_ignored(self):
        lines, catalog = _scenario_a()
        result = AllocationEngine().allocate(
            lines, catalog, [rule("1", "200000", ("Áo", 2), ("Mũ", 1), active=False)]
        )

        assert result.applied_bundles == ()


class TestTieBreaks:

    def test_higher_priority_wins_equal_savings(self):
        lines, catalog = _cart(("1", "Áo", "150000", 1))
        low = rule("1", "100000", ("Áo", 1), priority=0)
        high = rule("2", "100000", ("Áo", 1), priority=5)

        result = AllocationEngine().allocate(lines, catalog, [low, high])

        assert [b.rule.id for b in result.applied_bundles] == ["2"]
        assert result.total_savings == Money.of("50000")

    def test_greater_savings_beats_priority(self):
        lines, catalog = _cart(("1", "Áo", "150000", 1))
        cheap = rule("1", "90000", ("Áo", 1), priority=0)
        favoured = rule("2", "100000", ("Áo", 1), priority=99)

        result = AllocationEngine().allocate(lines, catalog, [favoured, cheap])

        assert [b.rule.id for b in result.applied_bundles] == ["1"]

    def test_full_tie_falls_back_to_lowest_rule_id(self):
        lines, catalog = _cart(("1", "Áo", "150000", 1))
        ten = rule("10", "100000", ("Áo", 1))
        two = rule("2", "100000", ("Áo", 1))

        result = AllocationEngine().allocate(lines, catalog, [ten, two])

        assert [b.rule.id for b in result.applied_bundles] == ["2"]

    def test_full_tie_independent_of_input_order(self):
        lines, catalog = _cart(("1", "Áo", "150000", 1))
        a = rule("3", "100000", ("Áo", 1))
        b = rule("4", "100000", ("Áo", 1))
        engine = AllocationEngine()

        assert engine.allocate(lines, catalog, [a, b]) == engine.allocate(lines, catalog, [b, a])


class TestMultipleRounds:

    def test_disjoint_rules_both_applied(self):
        lines, catalog = _cart(
            ("1", "Áo", "150000", 2),
            ("2", "Mũ", "90000", 1),
            ("3", "Quần", "80000", 1),
        )
        shirts = rule("1", "200000", ("Áo", 2))
        hat_and_pants = rule("2", "100000", ("Mũ", 1), ("Quần", 1))

        result = AllocationEngine().allocate(lines, catalog, [hat_and_pants, shirts])

        # Shirts save 100k, hat+pants save 70k: shirts go first.
        assert [b.rule.id for b in result.applied_bundles] == ["1", "2"]
        assert result.original_total == Money.of("470000")
        assert result.final_total == Money.of("300000")
        assert result.total_savings == Money.of("170000")
        assert result.remaining_items == ()
        _assert_reconciles(result)

    def test_competing_rules_greedy_takes_bigger_saving(self):
        lines, catalog = _cart(("1", "Áo", "150000", 2), ("2", "Mũ", "90000", 1))
        shirt_and_hat = rule("1", "150000", ("Áo", 1), ("Mũ", 1))  # saves 90k
        two_shirts = rule("2", "200000", ("Áo", 2))  # saves 100k

        result = AllocationEngine().allocate(lines, catalog, [shirt_and_hat, two_shirts])

        assert [b.rule.id for b in result.applied_bundles] == ["2"]
        assert [i.product_id for i in result.remaining_items] == ["2"]
        assert result.final_total == Money.of("290000")

    def test_rule_applied_several_times_at_once(self):
        lines, catalog = _cart(("1", "Áo", "100000", 7))
        result = AllocationEngine().allocate(lines, catalog, [rule("1", "150000", ("Áo", 2))])

        bundle = result.applied_bundles[0]
        assert bundle.applications == 3
        assert bundle.total_charged == Money.of("450000")
        assert bundle.savings == Money.of("150000")
        assert result.remaining_items[0].quantity == 1


class TestEdgeCases:

    def test_empty_cart(self):
        result = AllocationEngine().allocate([], {}, [rule("1", "1000", ("Áo", 1))])

        assert result.original_total == Money.zero()
        assert result.final_total == Money.zero()
        assert result.total_savings == Money.zero()
        assert result.applied_bundles == ()
        assert result.remaining_items == ()

    def test_unresolved_lines_dropped(self):
        lines, catalog = _cart(("1", "Áo", "100000", 1))
        lines.append(CartLine.of("ghost", 3))

        result = AllocationEngine().allocate(lines, catalog, [])

        assert result.original_total == Money.of("100000")
        assert [i.product_id for i in result.remaining_items] == ["1"]

    def test_zero_price_bundle(self):
        lines, catalog = _cart(("1", "Áo", "100000", 1))
        result = AllocationEngine().allocate(lines, catalog, [rule("1", "0", ("Áo", 1))])

        assert result.final_total == Money.zero()
        assert result.total_savings == Money.of("100000")

    def test_non_ascii_digit_rule_id(self):
        lines, catalog = _cart(("1", "Áo", "150000", 1))
        result = AllocationEngine().allocate(lines, catalog, [rule("²", "100000", ("Áo", 1))])

        assert [b.rule.id for b in result.applied_bundles] == ["²"]
        assert result.final_total == Money.of("100000")

    def test_rule_in_other_currency_skipped(self):
        lines, catalog = _cart(("1", "Áo", "150000", 1), ("2", "Áo", "120000", 1))
        usd_rule = BundleRule(
            id="1",
            name="USD combo",
            price=Money.of("5", "USD"),
            requirements=[CategoryRequirement("Áo", 2)],
        )
        engine = AllocationEngine()

        result = engine.allocate(lines, catalog, [usd_rule, rule("2", "200000", ("Áo", 2))])

        assert [b.rule.id for b in result.applied_bundles] == ["2"]
        assert result.final_total == Money.of("200000")
        assert engine.evaluate(lines, catalog, [usd_rule]) == []


# ── Properties ───────────────────────────────────────────────────────────────


_PROPERTY_CASES = [
    [],
    [("1", "200000", ("Áo", 2), ("Mũ", 1))],
    [("1", "100000", ("Áo", 1), ("Mũ", 1)), ("2", "250000", ("Áo", 3))],
    [("1", "50000", ("Mũ", 2)), ("2", "120000", ("Áo", 1), ("Mũ", 1)), ("3", "1", ("Quần", 1))],
]


class TestProperties:

    @pytest.mark.parametrize("rule_specs", _PROPERTY_CASES)
    def test_reconciliation_and_conservation(self, rule_specs):
        lines, catalog = _scenario_a()
        rules = [rule(rid, price, *reqs) for rid, price, *reqs in rule_specs]

        result = AllocationEngine().allocate(lines, catalog, rules)

        _assert_reconciles(result)
        _assert_conserves(result, lines)
        for bundle in result.applied_bundles:
            assert bundle.applications >= 1
            assert not bundle.savings.is_zero

    def test_recomputation_is_deterministic(self):
        lines, catalog = _scenario_a()
        rules = [
            rule("1", "100000", ("Áo", 1), ("Mũ", 1)),
            rule("2", "250000", ("Áo", 3)),
        ]
        engine = AllocationEngine()

        assert engine.allocate(lines, catalog, rules) == engine.allocate(lines, catalog, rules)

    def test_inputs_not_mutated(self):
        lines, catalog = _scenario_a()
        before = [(line.product_id, line.quantity.value) for line in lines]

        AllocationEngine().allocate(lines, catalog, [rule("1", "200000", ("Áo", 2), ("Mũ", 1))])

        assert [(line.product_id, line.quantity.value) for line in lines] == before
        assert len(catalog) == 5


# ── Ranking helpers ──────────────────────────────────────────────────────────


class TestEvaluate:

    def test_lists_applicable_rules_best_first(self):
        lines, catalog = _scenario_a()
        rules = [
            rule("1", "200000", ("Áo", 2), ("Mũ", 1)),   # saves 160k
            rule("2", "100000", ("Áo", 1), ("Mũ", 1)),   # x2, saves 240k
            rule("3", "999000", ("Áo", 1)),              # fits, saves nothing
            rule("4", "1000", ("Quần", 1)),              # does not fit
        ]

        evaluations = AllocationEngine().evaluate(lines, catalog, rules)

        assert [e.rule.id for e in evaluations] == ["2", "1", "3"]
        assert evaluations[0].max_applications == 2
        assert evaluations[0].savings_per_application == Money.of("140000")
        assert evaluations[0].savings_at_max_applications == Money.of("240000")
        assert [e.is_beneficial for e in evaluations] == [True, True, False]

    def test_select_best_requires_candidates(self):
        with pytest.raises(ValueError):
            AllocationEngine.select_best([])
