import unittest
from decimal import Decimal

from counting.nanocontracts.blueprints.counting import capped_amounts, forward_amounts, threshold_satisfied
from counting.nanocontracts.blueprints.counting_messages import Parent
from counting.nanocontracts.blueprints.counting_state import PART_PRECISION
from counting.nanocontracts.types import coin


class ThresholdTestCase(unittest.TestCase):
    def test_zero_threshold_accepts_anything(self):
        self.assertTrue(threshold_satisfied(coin(0, 'atom'), []))
        self.assertTrue(threshold_satisfied(coin(0, 'atom'), [coin(1, 'osmo')]))

    def test_exact_amount(self):
        self.assertTrue(threshold_satisfied(coin(10, 'atom'), [coin(10, 'atom')]))

    def test_insufficient_amount(self):
        self.assertFalse(threshold_satisfied(coin(10, 'atom'), [coin(5, 'atom')]))

    def test_other_denomination(self):
        self.assertFalse(threshold_satisfied(coin(10, 'atom'), [coin(100, 'osmo')]))
        self.assertTrue(threshold_satisfied(coin(10, 'atom'), [coin(100, 'osmo'), coin(12, 'atom')]))


class ForwardAmountsTestCase(unittest.TestCase):
    def test_part_of_each_balance(self):
        part = PART_PRECISION // 10
        funds = forward_amounts({'osmo': 55, 'atom': 20}, part)
        self.assertEqual(funds, [coin(2, 'atom'), coin(5, 'osmo')])

    def test_zero_part(self):
        self.assertEqual(forward_amounts({'atom': 1_000}, 0), [])

    def test_never_exceeds_balance(self):
        parts = [0, 1, PART_PRECISION // 3, PART_PRECISION // 2, PART_PRECISION - 1, PART_PRECISION]
        balances = {'atom': 1, 'osmo': 7, 'uusd': 10**30 + 1}
        for part in parts:
            for fund in forward_amounts(balances, part):
                self.assertLessEqual(fund.amount, balances[fund.denom])

    def test_large_balances_are_exact(self):
        part = Parent(addr='x', donating_period=1, part=Decimal('0.123456789012345678')).part_atomics(PART_PRECISION)
        funds = forward_amounts({'atom': 10**30}, part)
        self.assertEqual(funds, [coin(123456789012345678 * 10**12, 'atom')])


class CappedAmountsTestCase(unittest.TestCase):
    def test_no_caps(self):
        self.assertEqual(
            capped_amounts({'atom': 10, 'osmo': 3}, []),
            [coin(10, 'atom'), coin(3, 'osmo')],
        )

    def test_caps_limit_amounts(self):
        self.assertEqual(
            capped_amounts({'atom': 10, 'osmo': 3}, [coin(4, 'atom'), coin(30, 'osmo')]),
            [coin(4, 'atom'), coin(3, 'osmo')],
        )

    def test_caps_are_an_allow_list(self):
        self.assertEqual(capped_amounts({'atom': 10, 'osmo': 3}, [coin(4, 'atom')]), [coin(4, 'atom')])

    def test_cap_of_unheld_denomination(self):
        self.assertEqual(capped_amounts({'atom': 10}, [coin(4, 'uusd')]), [])

    def test_first_cap_wins(self):
        self.assertEqual(
            capped_amounts({'atom': 10}, [coin(2, 'atom'), coin(8, 'atom')]),
            [coin(2, 'atom')],
        )


class ParentTestCase(unittest.TestCase):
    def test_part_atomics_truncates(self):
        parent = Parent(addr='x', donating_period=1, part=Decimal('0.0000000000000000019'))
        self.assertEqual(parent.part_atomics(PART_PRECISION), 1)

    def test_part_bounds(self):
        with self.assertRaises(ValueError):
            Parent(addr='x', donating_period=1, part=Decimal('1.01'))
        with self.assertRaises(ValueError):
            Parent(addr='x', donating_period=1, part=Decimal('-0.1'))

    def test_period_must_be_positive(self):
        with self.assertRaises(ValueError):
            Parent(addr='x', donating_period=0, part=Decimal('0.5'))
