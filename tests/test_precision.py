"""
Tests for decimal money precision — no floating point anywhere.

Balances are Decimal with two fraction digits in Python and integer cents
in the database. These tests verify:
  - Balances come back with exactly two fraction digits
  - Amounts with more than two fraction digits are rejected
  - Many small transfers accumulate no rounding error
  - The Money column stores integer cents
"""

from decimal import Decimal

import pytest
from sqlalchemy import text

from bankcards.models.types import to_money


class TestToMoney:

    def test_normalizes_to_two_places(self):
        assert str(to_money(Decimal("10"))) == "10.00"
        assert str(to_money("10.5")) == "10.50"
        assert str(to_money(7)) == "7.00"

    def test_rejects_sub_cent_values(self):
        with pytest.raises(ValueError):
            to_money(Decimal("0.001"))


class TestDecimalPrecision:

    async def test_balance_has_two_fraction_digits(self, issue_card, card_holder):
        card = await issue_card(card_holder, balance="10")
        assert card["balance"] == "10.00"

    async def test_sub_cent_initial_balance_rejected(self, admin_client, card_holder):
        response = await admin_client.post(
            "/api/v1/cards",
            json={
                "card_number": "1111 2222 3333 4444",
                "owner_id": str(card_holder.id),
                "expiry_date": "2099-01-01",
                "initial_balance": "10.001",
            },
        )
        assert response.status_code == 422

    async def test_negative_initial_balance_rejected(self, admin_client, card_holder):
        response = await admin_client.post(
            "/api/v1/cards",
            json={
                "card_number": "1111 2222 3333 4444",
                "owner_id": str(card_holder.id),
                "expiry_date": "2099-01-01",
                "initial_balance": "-1.00",
            },
        )
        assert response.status_code == 422

    async def test_no_rounding_errors_with_repeated_small_transfers(
        self, issue_card, user_client, card_holder
    ):
        """Three transfers of 0.10 empty a 0.30 card exactly (0.1 + 0.1 + 0.1 != 0.3 in floats)."""
        source = await issue_card(card_holder, balance="0.30")
        destination = await issue_card(card_holder, balance="0.00")

        for _ in range(3):
            response = await user_client.post(
                "/api/v1/transfers",
                json={"from_card_id": source["id"], "to_card_id": destination["id"], "amount": "0.10"},
            )
            assert response.status_code == 204

        src = (await user_client.get(f"/api/v1/cards/{source['id']}")).json()
        dst = (await user_client.get(f"/api/v1/cards/{destination['id']}")).json()
        assert src["balance"] == "0.00"
        assert dst["balance"] == "0.30"

    async def test_balance_stored_as_integer_cents(self, issue_card, card_holder, db_session):
        card = await issue_card(card_holder, balance="1234.56")
        result = await db_session.execute(
            text("SELECT balance_cents FROM cards WHERE card_number_hash IS NOT NULL")
        )
        assert result.scalar_one() == 123456
        assert card["balance"] == "1234.56"
