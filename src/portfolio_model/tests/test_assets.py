# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Tests for asset variants and the price-update contract.
"""

import math
import unittest
import uuid
from dataclasses import replace
from datetime import date
from unittest.mock import Mock

import numpy as np

from ..asset import (Address, Bond, Commodity, Cryptocurrency, PricePoint, RealEstate, Stock,
                     PRICE_CHANGE_TOLERANCE, parse_unit)
from ..enums import CommodityUnit, RiskLevel
from ..exceptions import (AssetNameError, AssetSymbolError, BondRateError, InvalidAddressError,
                          InvalidParameterError, InvalidPriceError, InvalidQuantityError,
                          InvalidUnitError, InvalidZipCodeError, ValidationError)


def make_address(**overrides):
    fields = dict(street="Marszalkowska", house_number="10", city="Warsaw",
                  zip_code="00-001", country="Poland")
    fields.update(overrides)
    return Address(**fields)


def fixed_rng(*uniforms):
    rng = Mock()
    rng.random.side_effect = list(uniforms)
    return rng


class TestAssetBasics(unittest.TestCase):
    """Tests for fields shared by every asset."""

    def test_value_is_quantity_times_price(self):
        """Test value == quantity * current_price."""
        for quantity, price in [(10, 150.0), (0.5, 40000.0), (3, 0.0)]:
            stock = Stock("Apple Inc.", "AAPL", quantity, price)
            self.assertEqual(stock.value, quantity * price)

    def test_defaults_per_variant(self):
        """Test default volatility, mean return and risk for each variant."""
        stock = Stock("Apple Inc.", "AAPL", 1, 100.0)
        bond = Bond("Treasury", "UST", 1, 100.0, rate=0.05)
        crypto = Cryptocurrency("Bitcoin", "BTC", 1, 100.0)
        home = RealEstate("Flat", 100.0, make_address())
        gold = Commodity("Gold", "XAU", 1, 100.0, unit=CommodityUnit.OUNCE)

        self.assertEqual((stock.volatility, stock.mean_return, stock.risk_assessment),
                         (0.02, 0.0002, RiskLevel.HIGH))
        self.assertEqual((bond.volatility, bond.mean_return, bond.risk_assessment),
                         (0.0, 0.0002, RiskLevel.MEDIUM))
        self.assertEqual((crypto.volatility, crypto.risk_assessment), (0.08, RiskLevel.EXTREMELY_HIGH))
        self.assertEqual((home.volatility, home.mean_return, home.risk_assessment),
                         (0.005, 0.00015, RiskLevel.LOW))
        self.assertEqual((gold.volatility, gold.mean_return, gold.risk_assessment),
                         (0.015, 0.0003, RiskLevel.MEDIUM))
        self.assertFalse(home.is_mergeable)
        self.assertTrue(all(a.is_mergeable for a in (stock, bond, crypto, gold)))

    def test_symbol_is_upper_cased(self):
        """Test that symbols are stored upper-case."""
        self.assertEqual(Stock("Apple Inc.", " aapl ", 1, 1.0).symbol, "AAPL")

    def test_ids_are_unique(self):
        """Test that every asset gets its own id."""
        a = Stock("Apple Inc.", "AAPL", 1, 1.0)
        b = Stock("Apple Inc.", "AAPL", 1, 1.0)
        self.assertIsInstance(a.asset_id, uuid.UUID)
        self.assertNotEqual(a.asset_id, b.asset_id)
        self.assertNotEqual(a, b)

    def test_invalid_construction(self):
        """Test that invalid fields raise the matching ValidationError."""
        with self.assertRaises(AssetNameError):
            Stock("   ", "AAPL", 1, 1.0)
        with self.assertRaises(AssetSymbolError):
            Stock("Apple Inc.", "", 1, 1.0)
        with self.assertRaises(InvalidQuantityError):
            Stock("Apple Inc.", "AAPL", 0, 1.0)
        with self.assertRaises(InvalidPriceError):
            Stock("Apple Inc.", "AAPL", 1, -5.0)
        with self.assertRaises(InvalidParameterError):
            Stock("Apple Inc.", "AAPL", 1, 1.0, volatility=-0.1)
        with self.assertRaises(InvalidParameterError):
            Stock("Apple Inc.", "AAPL", 1, 1.0, low_price_threshold=float('nan'))

    def test_non_numeric_parameters(self):
        """Test that non-numeric simulation parameters raise InvalidParameterError."""
        stock = Stock("Apple Inc.", "AAPL", 1, 1.0)
        for field in ("volatility", "mean_return", "low_price_threshold"):
            for bad in ("high", [0.1]):
                with self.assertRaises(InvalidParameterError):
                    setattr(stock, field, bad)
        self.assertEqual((stock.volatility, stock.mean_return, stock.low_price_threshold),
                         (0.02, 0.0002, None))

    def test_invalid_quantity_keeps_state(self):
        """Test that a rejected quantity leaves the old value in place."""
        stock = Stock("Apple Inc.", "AAPL", 10, 150.0)
        for bad in (0, -1, float('nan'), float('inf'), "ten"):
            with self.assertRaises(InvalidQuantityError):
                stock.quantity = bad
        self.assertEqual(stock.quantity, 10)

    def test_validation_errors_are_value_errors(self):
        """Test that validation errors can be caught as ValueError."""
        with self.assertRaises(ValueError):
            Stock("Apple Inc.", "AAPL", -1, 1.0)
        self.assertTrue(issubclass(InvalidZipCodeError, InvalidAddressError))
        self.assertTrue(issubclass(InvalidAddressError, ValidationError))

    def test_percent_change(self):
        """Test percent change since purchase."""
        stock = Stock("Apple Inc.", "AAPL", 1, 100.0)
        stock.update_price(125.0)
        self.assertAlmostEqual(stock.percent_change, 0.25)
        self.assertEqual(Stock("Free", "FREE", 1, 0.0).percent_change, 0.0)

    def test_ordering_by_value(self):
        """Test that assets compare by value."""
        small = Stock("Small", "SML", 1, 10.0)
        large = Stock("Large", "LRG", 10, 10.0)
        self.assertLess(small, large)
        self.assertEqual(sorted([large, small]), [small, large])

    def test_risk_levels_are_ordered(self):
        """Test LOW < MEDIUM < HIGH < EXTREMELY_HIGH."""
        self.assertLess(RiskLevel.LOW, RiskLevel.MEDIUM)
        self.assertLess(RiskLevel.MEDIUM, RiskLevel.HIGH)
        self.assertLess(RiskLevel.HIGH, RiskLevel.EXTREMELY_HIGH)

    def test_history_is_read_only_copy(self):
        """Test that price_history is a tuple snapshot."""
        stock = Stock("Apple Inc.", "AAPL", 1, 100.0)
        stock.record_price(date(2025, 1, 1))
        history = stock.price_history
        self.assertIsInstance(history, tuple)
        self.assertEqual(history, (PricePoint(date(2025, 1, 1), 100.0),))
        stock.record_price(date(2025, 1, 2), 101.0)
        self.assertEqual(len(history), 1)
        self.assertEqual(len(stock.price_history), 2)

    def test_history_frame(self):
        """Test the DataFrame view of the history."""
        stock = Stock("Apple Inc.", "AAPL", 1, 100.0)
        stock.record_price(date(2025, 1, 1))
        stock.record_price(date(2025, 1, 2), 102.5)
        df = stock.history_frame()
        self.assertEqual(list(df.columns), ['Date', 'Price'])
        self.assertEqual(len(df), 2)
        self.assertEqual(df['Price'].iloc[-1], 102.5)


class TestPriceUpdateContract(unittest.TestCase):
    """Tests for update_price notifications."""

    def test_price_rise_notifies(self):
        """Test that on_price_update gets symbol, price and message."""
        stock = Stock("Apple Inc.", "AAPL", 10, 150.0)
        handler = Mock()
        stock.on_price_update += handler

        self.assertTrue(stock.update_price(160.0))
        handler.assert_called_once_with("AAPL", 160.0, "Price rose by $10.00")
        self.assertEqual(stock.current_price, 160.0)

    def test_price_drop_message(self):
        """Test the dropped message with thousands separator."""
        btc = Cryptocurrency("Bitcoin", "BTC", 1, 50000.0)
        handler = Mock()
        btc.on_price_update += handler
        btc.update_price(30000.0)
        handler.assert_called_once_with("BTC", 30000.0, "Price dropped by $20,000.00")

    def test_change_within_tolerance_is_ignored(self):
        """Test that moves <= tolerance change nothing and notify no one."""
        stock = Stock("Apple Inc.", "AAPL", 10, 150.0)
        handler = Mock()
        stock.on_price_update += handler

        self.assertFalse(stock.update_price(150.0 + PRICE_CHANGE_TOLERANCE / 2))
        self.assertFalse(stock.update_price(150.0))
        self.assertEqual(stock.current_price, 150.0)
        handler.assert_not_called()

    def test_invalid_price_keeps_state(self):
        """Test that a negative or non-finite price is rejected."""
        stock = Stock("Apple Inc.", "AAPL", 10, 150.0)
        handler = Mock()
        stock.on_price_update += handler
        for bad in (-1.0, float('nan'), float('inf')):
            with self.assertRaises(InvalidPriceError):
                stock.update_price(bad)
        self.assertEqual(stock.current_price, 150.0)
        handler.assert_not_called()

    def test_critical_drop_fires_once_per_update(self):
        """Test critical drop below threshold, level-triggered."""
        btc = Cryptocurrency("Bitcoin", "BTC", 0.5, 50000.0, low_price_threshold=40000.0)
        critical = Mock()
        btc.on_critical_drop += critical

        btc.update_price(30000.0)
        critical.assert_called_once_with("BTC", 30000.0, "CRITICAL: Below $40,000.00")

        # Still below the threshold: fires again on the next qualifying update
        btc.update_price(29000.0)
        self.assertEqual(critical.call_count, 2)

        btc.update_price(45000.0)
        self.assertEqual(critical.call_count, 2)

    def test_no_critical_drop_without_threshold(self):
        """Test that no threshold means no critical notifications."""
        btc = Cryptocurrency("Bitcoin", "BTC", 1, 50000.0)
        critical = Mock()
        btc.on_critical_drop += critical
        btc.update_price(1.0)
        critical.assert_not_called()

    def test_update_notifies_before_critical(self):
        """Test that the price update is dispatched before the critical drop."""
        btc = Cryptocurrency("Bitcoin", "BTC", 1, 50000.0, low_price_threshold=40000.0)
        calls = []
        btc.on_price_update += lambda s, p, m: calls.append('update')
        btc.on_critical_drop += lambda s, p, m: calls.append('critical')
        btc.update_price(10000.0)
        self.assertEqual(calls, ['update', 'critical'])


class TestStockSimulation(unittest.TestCase):
    """Tests for GBM-driven variants."""

    def test_simulation_appends_history(self):
        """Test that a GBM step moves the price and records it."""
        rng = fixed_rng(0.5, 0.75)
        stock = Stock("Apple Inc.", "AAPL", 10, 150.0)
        stock.simulate_price_change(date(2025, 1, 2), rng)

        z = math.sqrt(-2.0 * math.log(0.5))
        expected = 150.0 * math.exp(0.0002 - 0.5 * 0.02 ** 2 + 0.02 * z)
        self.assertAlmostEqual(stock.current_price, expected, places=9)
        self.assertEqual(stock.price_history[-1], PricePoint(date(2025, 1, 2), stock.current_price))

    def test_commodity_simulates(self):
        """Test that commodities take GBM steps too."""
        gold = Commodity("Gold", "XAU", 2, 2000.0, unit="ounce")
        gold.simulate_price_change(date(2025, 1, 2), np.random.default_rng(5))
        self.assertEqual(len(gold.price_history), 1)


class TestBond(unittest.TestCase):
    """Tests for Bond."""

    def test_one_tick_accrues_daily_interest(self):
        """Test price after one tick at 5%."""
        bond = Bond("Treasury", "UST", 1, 100.0, rate=0.05)
        bond.simulate_price_change(date(2025, 1, 2))
        self.assertAlmostEqual(bond.current_price, 100.0 * (1 + 0.05 / 365), places=12)
        self.assertEqual(len(bond.price_history), 1)

    def test_history_appended_even_without_move(self):
        """Test that a 0% bond still records a point every tick."""
        bond = Bond("Zero", "ZRO", 1, 100.0, rate=0.0)
        bond.simulate_price_change(date(2025, 1, 2))
        bond.simulate_price_change(date(2025, 1, 3))
        self.assertEqual(bond.current_price, 100.0)
        self.assertEqual(len(bond.price_history), 2)

    def test_rate_validation(self):
        """Test that negative or non-numeric rates raise BondRateError."""
        with self.assertRaises(BondRateError):
            Bond("Treasury", "UST", 1, 100.0, rate=-0.01)
        bond = Bond("Treasury", "UST", 1, 100.0, rate=0.05)
        with self.assertRaises(BondRateError):
            bond.rate = "high"
        self.assertEqual(bond.rate, 0.05)


class TestRealEstate(unittest.TestCase):
    """Tests for RealEstate and Address."""

    def test_no_change_except_first_of_month(self):
        """Test that only day 1 moves the price."""
        home = RealEstate("Flat", 300000.0, make_address())
        rng = Mock()
        home.simulate_price_change(date(2025, 3, 15), rng)
        self.assertEqual(home.current_price, 300000.0)
        self.assertEqual(home.price_history, ())
        rng.random.assert_not_called()

    def test_first_of_month_moves_price(self):
        """Test a GBM step on the first day of the month."""
        home = RealEstate("Flat", 300000.0, make_address())
        home.simulate_price_change(date(2025, 4, 1), fixed_rng(0.5, 0.75))

        z = math.sqrt(-2.0 * math.log(0.5))
        expected = 300000.0 * math.exp(0.00015 - 0.5 * 0.005 ** 2 + 0.005 * z)
        self.assertAlmostEqual(home.current_price, expected, places=6)
        self.assertEqual(len(home.price_history), 1)

    def test_defaults(self):
        """Test default symbol and quantity."""
        home = RealEstate("Flat", 300000.0, make_address())
        self.assertEqual(home.symbol, "PROP")
        self.assertEqual(home.quantity, 1)
        self.assertEqual(home.summary_key, f"PROP:{home.asset_id}")
        self.assertEqual(home.group_key, "PROP:Flat")

    def test_address_validation(self):
        """Test address field validation."""
        with self.assertRaises(InvalidZipCodeError):
            make_address(zip_code="12")
        with self.assertRaises(InvalidZipCodeError):
            make_address(zip_code="   ")
        with self.assertRaises(InvalidAddressError):
            make_address(street="")
        with self.assertRaises(InvalidAddressError):
            make_address(country=" ")

    def test_address_replace_revalidates(self):
        """Test that replacing a field validates again."""
        address = make_address()
        with self.assertRaises(InvalidZipCodeError):
            replace(address, zip_code="1")
        moved = replace(address, city="Krakow")
        self.assertEqual(moved.city, "Krakow")

    def test_address_setter_type_checked(self):
        """Test that address must be an Address."""
        home = RealEstate("Flat", 300000.0, make_address())
        with self.assertRaises(InvalidAddressError):
            home.address = "Somewhere 1"

    def test_address_str(self):
        """Test the printable address."""
        address = make_address(flat_number="4")
        self.assertEqual(str(address), "Marszalkowska 10/4, 00-001 Warsaw, Poland")


class TestCommodity(unittest.TestCase):
    """Tests for Commodity units."""

    def test_parse_unit(self):
        """Test unit coercion from enum, name and value."""
        self.assertEqual(parse_unit(CommodityUnit.BARREL), CommodityUnit.BARREL)
        self.assertEqual(parse_unit("OUNCE"), CommodityUnit.OUNCE)
        self.assertEqual(parse_unit("ounce"), CommodityUnit.OUNCE)
        self.assertEqual(parse_unit("megawatt-hour"), CommodityUnit.MWH)

    def test_invalid_unit(self):
        """Test that unknown units raise InvalidUnitError."""
        with self.assertRaises(InvalidUnitError):
            parse_unit("pound")
        with self.assertRaises(InvalidUnitError):
            Commodity("Oil", "CL", 1, 70.0, unit=42)

    def test_group_key_includes_unit(self):
        """Test that the unit is part of the simulation group."""
        oil = Commodity("Oil", "CL", 1, 70.0, unit="barrel")
        self.assertEqual(oil.group_key, "CL:BARREL")
        self.assertEqual(oil.summary_key, "CL")


class TestClone(unittest.TestCase):
    """Tests for asset cloning."""

    def test_clone_copies_state_with_new_id(self):
        """Test that a clone matches everything but the id and subscribers."""
        oil = Commodity("Oil", "CL", 3, 70.0, unit="barrel", low_price_threshold=50.0)
        oil.on_price_update += Mock()
        oil.update_price(72.5)
        oil.record_price(date(2025, 1, 2))

        twin = oil.clone()
        self.assertIsInstance(twin, Commodity)
        self.assertNotEqual(twin.asset_id, oil.asset_id)
        self.assertEqual(twin.unit, CommodityUnit.BARREL)
        self.assertEqual(twin.current_price, 72.5)
        self.assertEqual(twin.purchase_price, 70.0)
        self.assertEqual(twin.low_price_threshold, 50.0)
        self.assertEqual(twin.price_history, oil.price_history)
        self.assertEqual(len(twin.on_price_update), 0)
        self.assertIsNone(twin.portfolio)

    def test_clone_is_independent(self):
        """Test that changing the clone leaves the original alone."""
        bond = Bond("Treasury", "UST", 1, 100.0, rate=0.05)
        twin = bond.clone()
        twin.rate = 0.1
        twin.quantity = 5
        twin.simulate_price_change(date(2025, 1, 2))
        self.assertEqual(bond.rate, 0.05)
        self.assertEqual(bond.quantity, 1)
        self.assertEqual(bond.price_history, ())


if __name__ == '__main__':
    unittest.main()
