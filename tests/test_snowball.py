"""Tests for accelerated multi-debt payoff."""

import pytest
from debtcalc.config import SimulationLimits
from debtcalc.errors import InvalidInput, RunawayIteration
from debtcalc.payoff import simulate_payoff
from debtcalc.snowball import Debt, simulate_snowball


class TestDebt:
    """Tests for the Debt record."""

    def test_from_apr_percent(self):
        debt = Debt.from_apr(1, 1000, 18, 50)

        assert debt.monthly_rate == pytest.approx(0.015)
        assert not debt.paid_off

    def test_from_apr_fraction(self):
        debt = Debt.from_apr(1, 1000, 0.18, 50)

        assert debt.monthly_rate == pytest.approx(0.015)

    def test_from_apr_zero(self):
        assert Debt.from_apr(1, 1000, 0, 50).monthly_rate == 0


class TestSimulateSnowball:
    """Tests for the snowball simulator."""

    def test_freed_payment_rolls_to_next_debt(self):
        """Debt 1 clears in month 10; debt 2 then gets $150/month."""
        debts = [
            Debt(id=1, principal=1000, monthly_rate=0, scheduled_payment=100),
            Debt(id=2, principal=2000, monthly_rate=0, scheduled_payment=50),
        ]

        result = simulate_snowball(debts, extra_payment=0)

        assert result.total_months == 20
        assert result.total_interest == 0
        assert result.payoff_months == {1: 10, 2: 20}

        month_11 = result.schedule[(result.schedule['month'] == 11)]
        assert list(month_11['debt_id']) == [2]
        assert month_11.iloc[0]['payment'] == 150

    def test_cascade_within_one_month(self):
        """Extra payment clears a small debt and spills into the next."""
        debts = [
            Debt(id='a', principal=100, monthly_rate=0, scheduled_payment=50),
            Debt(id='b', principal=1000, monthly_rate=0, scheduled_payment=50),
        ]

        result = simulate_snowball(debts, extra_payment=100)

        assert result.payoff_months['a'] == 1
        month_1 = result.schedule[result.schedule['month'] == 1].set_index('debt_id')
        assert month_1.loc['a', 'payment'] == 100
        assert month_1.loc['b', 'payment'] == 100
        assert month_1.loc['b', 'balance'] == 900
        assert result.total_months == 6

    def test_entry_order_decides_who_gets_the_pool(self):
        """Debts are not re-ranked by balance."""
        big = Debt(id='big', principal=1000, monthly_rate=0, scheduled_payment=10)
        small = Debt(id='small', principal=100, monthly_rate=0, scheduled_payment=10)

        big_first = simulate_snowball([big, small], extra_payment=40)
        small_first = simulate_snowball([small, big], extra_payment=40)

        assert big_first.payoff_months == {'small': 10, 'big': 19}
        assert small_first.payoff_months == {'small': 2, 'big': 19}

    def test_single_debt_matches_single_simulator(self):
        debt = Debt.from_apr(1, 5000, 18, 150)

        snowball = simulate_snowball([debt])
        single = simulate_payoff(5000, debt.monthly_rate, 150)

        assert snowball.total_months == single.months
        assert snowball.total_interest == pytest.approx(single.total_interest, rel=1e-9)

    def test_interest_no_more_than_independent_payoff(self):
        debts = [
            Debt.from_apr(1, 2000, 18, 100),
            Debt.from_apr(2, 5000, 6, 150),
            Debt.from_apr(3, 800, 24, 40),
        ]
        singles = [simulate_payoff(d.principal, d.monthly_rate, d.scheduled_payment) for d in debts]

        result = simulate_snowball(debts, extra_payment=0)

        assert result.total_interest <= sum(s.total_interest for s in singles) + 1e-6
        assert result.total_months <= max(s.months for s in singles)

    def test_extra_payment_saves_interest(self):
        debts = [
            Debt.from_apr(1, 2000, 18, 100),
            Debt.from_apr(2, 5000, 6, 150),
        ]

        without = simulate_snowball(debts, extra_payment=0)
        with_extra = simulate_snowball(debts, extra_payment=200)

        assert with_extra.total_interest < without.total_interest
        assert with_extra.total_months < without.total_months

    def test_all_debts_end_at_zero(self):
        debts = [
            Debt.from_apr(1, 2000, 18, 100),
            Debt.from_apr(2, 5000, 6, 150),
        ]

        result = simulate_snowball(debts, extra_payment=75)

        assert all(d.paid_off and d.principal == 0 for d in result.debts)
        assert (result.schedule['balance'] >= 0).all()
        assert set(result.payoff_months) == {1, 2}
        assert max(result.payoff_months.values()) == result.total_months

    def test_input_debts_not_mutated(self):
        debts = [Debt(id=1, principal=1000, monthly_rate=0.01, scheduled_payment=100)]

        simulate_snowball(debts, extra_payment=50)

        assert debts[0].principal == 1000
        assert not debts[0].paid_off

    def test_empty_plan(self):
        result = simulate_snowball([], extra_payment=100)

        assert result.total_months == 0
        assert result.total_interest == 0
        assert result.schedule.empty

    def test_runaway_plan(self):
        debts = [Debt.from_apr(1, 1000, 24, 1)]

        with pytest.raises(RunawayIteration) as exc_info:
            simulate_snowball(debts)

        assert exc_info.value.limit == 600
        assert exc_info.value.months == 600

    def test_custom_limit(self):
        debts = [Debt(id=1, principal=1000, monthly_rate=0, scheduled_payment=100)]

        with pytest.raises(RunawayIteration):
            simulate_snowball(debts, limits=SimulationLimits(max_snowball_periods=9))

        assert simulate_snowball(debts, limits=SimulationLimits(max_snowball_periods=10)).total_months == 10

    def test_negative_extra_payment(self):
        debts = [Debt(id=1, principal=1000, monthly_rate=0, scheduled_payment=100)]

        with pytest.raises(InvalidInput):
            simulate_snowball(debts, extra_payment=-5)

    def test_zero_payment_rejected(self):
        debts = [Debt(id=1, principal=1000, monthly_rate=0, scheduled_payment=0)]

        with pytest.raises(InvalidInput):
            simulate_snowball(debts)

    def test_duplicate_ids_rejected(self):
        debts = [
            Debt(id=1, principal=1000, monthly_rate=0, scheduled_payment=100),
            Debt(id=1, principal=500, monthly_rate=0, scheduled_payment=100),
        ]

        with pytest.raises(InvalidInput):
            simulate_snowball(debts)

    def test_zero_balance_debt_is_skipped(self):
        """A debt already at zero frees nothing for the others."""
        debts = [
            Debt(id=1, principal=0, monthly_rate=0, scheduled_payment=100),
            Debt(id=2, principal=500, monthly_rate=0, scheduled_payment=50),
        ]

        result = simulate_snowball(debts)

        assert result.total_months == 10
        assert result.payoff_months == {1: 0, 2: 10}
        assert 1 not in set(result.schedule['debt_id'])
        assert [d.id for d in result.debts] == [1, 2]
        assert all(d.paid_off for d in result.debts)

    def test_zero_balance_debt_may_have_no_payment(self):
        debts = [
            Debt(id=1, principal=0, monthly_rate=0.01, scheduled_payment=0),
            Debt(id=2, principal=100, monthly_rate=0, scheduled_payment=50),
        ]

        result = simulate_snowball(debts)

        assert result.payoff_months == {1: 0, 2: 2}
        assert result.total_interest == 0

    def test_only_zero_balance_debts(self):
        result = simulate_snowball([Debt(id=1, principal=0, monthly_rate=0, scheduled_payment=25)])

        assert result.total_months == 0
        assert result.payoff_months == {1: 0}
        assert result.schedule.empty

    def test_negative_principal_rejected(self):
        debts = [Debt(id=1, principal=-100, monthly_rate=0, scheduled_payment=50)]

        with pytest.raises(InvalidInput):
            simulate_snowball(debts)
