"""
Tests for the transfer domain service on in-memory cards.

Scenario baseline: amount 100.00, source balance 1000.00, destination
balance 500.00. These tests verify:
  - A valid transfer changes exactly the two balances by the amount
  - Each precondition fails with its own message, in order
  - A rejected transfer leaves both balances untouched
"""

import uuid
from datetime import date
from decimal import Decimal

import pytest

from bankcards.exceptions import TransferNotAllowedError
from bankcards.models.card import Card, CardStatus
from bankcards.services.transfer_service import transfer


def make_card(balance: str, status: CardStatus = CardStatus.ACTIVE) -> Card:
    return Card(
        id=uuid.uuid4(),
        card_number_encrypted="",
        card_number_hash="",
        owner_id=uuid.uuid4(),
        expiry_date=date(2099, 1, 1),
        status=status,
        balance=Decimal(balance),
    )


@pytest.fixture
def from_card():
    return make_card("1000.00")


@pytest.fixture
def to_card():
    return make_card("500.00")


class TestTransferSuccess:

    def test_moves_amount_between_cards(self, from_card, to_card):
        transfer(from_card, to_card, Decimal("100.00"))
        assert from_card.balance == Decimal("900.00")
        assert to_card.balance == Decimal("600.00")

    def test_total_is_conserved(self, from_card, to_card):
        before = from_card.balance + to_card.balance
        transfer(from_card, to_card, Decimal("123.45"))
        assert from_card.balance + to_card.balance == before

    def test_exact_balance_empties_source(self, from_card, to_card):
        transfer(from_card, to_card, Decimal("1000.00"))
        assert from_card.balance == Decimal("0.00")
        assert str(from_card.balance) == "0.00"
        assert to_card.balance == Decimal("1500.00")

    def test_whole_number_amount_is_accepted(self, from_card, to_card):
        transfer(from_card, to_card, Decimal("100"))
        assert str(from_card.balance) == "900.00"

    def test_direction_is_never_inferred(self, from_card, to_card):
        """Money always leaves the first argument, even if it is the poorer card."""
        transfer(to_card, from_card, Decimal("100.00"))
        assert to_card.balance == Decimal("400.00")
        assert from_card.balance == Decimal("1100.00")


class TestTransferRejection:

    def assert_untouched(self, from_card, to_card):
        assert from_card.balance == Decimal("1000.00")
        assert to_card.balance == Decimal("500.00")

    def test_same_card(self, from_card, to_card):
        with pytest.raises(TransferNotAllowedError, match="Cannot transfer to the same card"):
            transfer(from_card, from_card, Decimal("100.00"))
        self.assert_untouched(from_card, to_card)

    def test_same_card_is_checked_before_status(self):
        card = make_card("1000.00", CardStatus.BLOCKED)
        with pytest.raises(TransferNotAllowedError, match="same card"):
            transfer(card, card, Decimal("100.00"))

    def test_blocked_source(self, to_card):
        from_card = make_card("1000.00", CardStatus.BLOCKED)
        with pytest.raises(TransferNotAllowedError, match="Cannot transfer from card with status: BLOCKED"):
            transfer(from_card, to_card, Decimal("100.00"))
        self.assert_untouched(from_card, to_card)

    def test_expired_destination(self, from_card):
        to_card = make_card("500.00", CardStatus.EXPIRED)
        with pytest.raises(TransferNotAllowedError, match="Cannot transfer to card with status: EXPIRED"):
            transfer(from_card, to_card, Decimal("100.00"))
        self.assert_untouched(from_card, to_card)

    @pytest.mark.parametrize("amount", ["0.00", "0", "-1.00", "-100.00"])
    def test_non_positive_amount(self, from_card, to_card, amount):
        with pytest.raises(TransferNotAllowedError, match="Transfer amount must be positive"):
            transfer(from_card, to_card, Decimal(amount))
        self.assert_untouched(from_card, to_card)

    def test_more_than_two_decimal_places(self, from_card, to_card):
        with pytest.raises(TransferNotAllowedError, match="at most 2 decimal places"):
            transfer(from_card, to_card, Decimal("10.005"))
        self.assert_untouched(from_card, to_card)

    def test_insufficient_balance(self, from_card, to_card):
        with pytest.raises(
            TransferNotAllowedError,
            match="Insufficient balance for transfer. Available: 1000.00, Required: 2000.00",
        ):
            transfer(from_card, to_card, Decimal("2000.00"))
        self.assert_untouched(from_card, to_card)

    def test_one_cent_over_balance(self, from_card, to_card):
        with pytest.raises(TransferNotAllowedError, match="Required: 1000.01"):
            transfer(from_card, to_card, Decimal("1000.01"))
        self.assert_untouched(from_card, to_card)
