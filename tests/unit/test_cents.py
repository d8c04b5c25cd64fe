"""Tests for ws_common.cents: fixed-point money helpers."""

from decimal import Decimal

import pytest

from src.ws_common.cents import (
    cents_to_str,
    coins_to_milli,
    milli_to_coins,
    parse_price,
)


class TestParsePrice:
    @pytest.mark.parametrize(
        ("raw", "cents"),
        [("19.99", 1999), ("5", 500), ("0.5", 50), ("0.01", 1), ("1000.00", 100000)],
    )
    def test_valid(self, raw: str, cents: int) -> None:
        assert parse_price(raw) == cents

    @pytest.mark.parametrize("raw", ["", "abc", "1.999", "-1", "1.", ".5", "1,00", " 1"])
    def test_invalid_raises(self, raw: str) -> None:
        with pytest.raises(ValueError):
            parse_price(raw)


class TestCentsToStr:
    def test_basic(self) -> None:
        assert cents_to_str(3001) == "30.01"

    def test_zero(self) -> None:
        assert cents_to_str(0) == "0.00"

    def test_one_cent(self) -> None:
        assert cents_to_str(1) == "0.01"

    def test_negative(self) -> None:
        assert cents_to_str(-50) == "-0.50"


class TestCoins:
    def test_coins_to_milli(self) -> None:
        assert coins_to_milli(Decimal("12.5")) == 12500
        assert coins_to_milli("0.001") == 1
        assert coins_to_milli(7) == 7000

    def test_rounds_half_up(self) -> None:
        assert coins_to_milli("0.0005") == 1
        assert coins_to_milli("0.0004") == 0

    @pytest.mark.parametrize("raw", ["abc", "NaN", "Infinity"])
    def test_garbage_raises(self, raw: str) -> None:
        with pytest.raises(ValueError):
            coins_to_milli(raw)

    def test_milli_to_coins(self) -> None:
        assert milli_to_coins(1250) == Decimal("1.25")
        assert str(milli_to_coins(5000)) == "5"
        assert str(milli_to_coins(0)) == "0"


class TestConservation:
    def test_ten_thousand_one_cent_transfers_conserve_the_sum(self) -> None:
        """Integer cents never drift, unlike repeated float additions of 0.01."""
        buyer, seller = parse_price("100.00"), 0
        amount = parse_price("0.01")
        for _ in range(10_000):
            buyer -= amount
            seller += amount
        assert buyer + seller == 10_000
        assert cents_to_str(buyer) == "0.00"
        assert cents_to_str(seller) == "100.00"
