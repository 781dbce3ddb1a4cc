"""Unit tests for indicio input normalization (peso parsing, optional text)."""

from decimal import Decimal

import pytest
from sii_dicri.application.usecases.indicios.indicio_input import (
    MSG_INVALID_PESO,
    IndicioInput,
    parse_peso,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("1,5", Decimal("1.50")),
        ("2.345", Decimal("2.35")),
        (3, Decimal("3.00")),
        (Decimal("0"), Decimal("0.00")),
        (" 10,25 ", Decimal("10.25")),
    ],
)
def test_parse_peso_accepts_decimal_comma_and_numbers(raw, expected):
    assert parse_peso(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_parse_peso_empty_is_none(raw):
    assert parse_peso(raw) is None


@pytest.mark.parametrize("raw", ["-1", "abc", "1,2,3", "NaN", "Infinity", True, "100000000"])
def test_parse_peso_rejects_invalid_values(raw):
    with pytest.raises(ValueError, match=MSG_INVALID_PESO):
        parse_peso(raw)


def test_to_data_cleans_optional_text():
    data = IndicioInput(
        nombre="  Casquillo ", descripcion="  ", color=" gris ", peso="0,5"
    ).to_data()

    assert data.nombre == "Casquillo"
    assert data.descripcion is None
    assert data.color == "gris"
    assert data.peso == Decimal("0.50")
