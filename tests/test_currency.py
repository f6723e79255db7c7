import pytest

from shop_capital.currency import CurrencyConverter


def test_usd_is_the_identity():
    converter = CurrencyConverter()

    assert converter.to_display(12.5) == 12.5
    assert converter.from_display(12.5) == 12.5
    assert converter.format(1234.5) == "$1,234.50"
    assert converter.format(-3) == "-$3.00"


def test_mzn_uses_exchange_rate():
    converter = CurrencyConverter("MZN", exchange_rate=64.0)

    assert converter.to_display(10.0) == pytest.approx(640.0)
    assert converter.from_display(640.0) == pytest.approx(10.0)
    assert converter.format(100.0) == "6.400,00 MT"
    assert converter.symbol == "MT"


def test_invalid_settings_are_rejected():
    with pytest.raises(ValueError, match="currency"):
        CurrencyConverter("EUR")  # type: ignore[arg-type]
    with pytest.raises(ValueError, match="Exchange rate"):
        CurrencyConverter("MZN", exchange_rate=0)
