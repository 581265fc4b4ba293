from __future__ import annotations

from decimal import Decimal

import pytest

from backoffice.utils.money import has_more_than_cents, to_money


def test_to_money_quantizes_to_cents():
    assert to_money("1215.4") == Decimal("1215.40")
    assert to_money(None) == Decimal("0.00")


def test_to_money_refuses_floats():
    with pytest.raises(TypeError):
        to_money(0.1)


def test_sub_cent_detection():
    assert has_more_than_cents(Decimal("1.001"))
    assert not has_more_than_cents(Decimal("1.10"))
