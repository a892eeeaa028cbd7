from __future__ import annotations

from datetime import date

import pytest

from satr.utils.validators import validate_date, validate_date_range, validate_rfc


class TestValidateDate:
    def test_valid(self):
        assert validate_date("2024-02-29") == date(2024, 2, 29)

    def test_invalid(self):
        with pytest.raises(ValueError, match="Fecha inválida"):
            validate_date("2023-02-29")

    def test_wrong_format(self):
        with pytest.raises(ValueError):
            validate_date("01/02/2024")


class TestValidateRfc:
    @pytest.mark.parametrize("rfc", ["AAA010101AAA", "GODE561231GR8", "XAXX010101000", "ÑA&010101AB1"])
    def test_valid(self, rfc):
        assert validate_rfc(rfc) == rfc

    def test_normalizes_case_and_whitespace(self):
        assert validate_rfc("  aaa010101aaa ") == "AAA010101AAA"

    @pytest.mark.parametrize("rfc", ["", "AAA", "AAA01010AAA", "AAAAA010101AAA", "AAA010101AA-"])
    def test_invalid(self, rfc):
        with pytest.raises(ValueError, match="RFC inválido"):
            validate_rfc(rfc)


class TestValidateDateRange:
    def test_open_bounds(self):
        validate_date_range(None, None)
        validate_date_range(date(2024, 1, 1), None)

    def test_same_day(self):
        validate_date_range(date(2024, 1, 1), date(2024, 1, 1))

    def test_reversed(self):
        with pytest.raises(ValueError, match="posterior"):
            validate_date_range(date(2024, 2, 1), date(2024, 1, 1))
