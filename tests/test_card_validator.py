"""
Tests for the card validator and the card lifecycle transitions.

These tests run against Card objects directly (plus a real repository
where a uniqueness check is needed) and verify:
  - Creation is rejected for ADMIN owners, non-future expiry dates and
    card numbers whose blind index already exists
  - ACTIVE <-> BLOCKED are the only manual transitions; EXPIRED is final
  - Deletion requires a BLOCKED or EXPIRED card with a zero balance
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from bankcards.crypto import card_cipher, card_hasher
from bankcards.exceptions import (
    CardAlreadyExistsError,
    CardDataNotValidError,
    CardOperationNotAllowedError,
)
from bankcards.models.card import Card, CardStatus
from bankcards.models.user import Role, User
from bankcards.repositories import CardRepository, UserRepository
from bankcards.services import card_service
from bankcards.validators import card_validator


TODAY = date(2030, 6, 15)
MASKED = "**** **** **** 4444"


def make_card(status=CardStatus.ACTIVE, balance="0.00", expiry_date=None, number="1111 2222 3333 4444"):
    return Card(
        card_number_encrypted=card_cipher.encrypt(number),
        card_number_hash=card_hasher.hash(number),
        owner_id=None,
        expiry_date=expiry_date or TODAY + timedelta(days=365),
        status=status,
        balance=Decimal(balance),
    )


@pytest.fixture
def owner():
    return User(username="alice", hashed_password="x", role=Role.USER)


class TestValidateForCreate:

    async def test_valid_card_passes(self, db_session, owner):
        await card_validator.validate_for_create(
            CardRepository(db_session), make_card(), owner, MASKED, today=TODAY
        )

    async def test_admin_owner_is_rejected(self, db_session):
        admin = User(username="admin", hashed_password="x", role=Role.ADMIN)
        with pytest.raises(CardOperationNotAllowedError, match="Cannot create a card for ADMIN user"):
            await card_validator.validate_for_create(
                CardRepository(db_session), make_card(), admin, MASKED, today=TODAY
            )

    async def test_admin_owner_is_rejected_before_other_checks(self, db_session):
        """An ADMIN owner fails even when the expiry date is also invalid."""
        admin = User(username="admin", hashed_password="x", role=Role.ADMIN)
        card = make_card(expiry_date=TODAY - timedelta(days=1))
        with pytest.raises(CardOperationNotAllowedError):
            await card_validator.validate_for_create(
                CardRepository(db_session), card, admin, MASKED, today=TODAY
            )

    async def test_expiry_today_is_rejected(self, db_session, owner):
        card = make_card(expiry_date=TODAY)
        with pytest.raises(CardDataNotValidError, match="Expiration date must be in the future"):
            await card_validator.validate_for_create(
                CardRepository(db_session), card, owner, MASKED, today=TODAY
            )

    async def test_expiry_in_the_past_is_rejected(self, db_session, owner):
        card = make_card(expiry_date=TODAY - timedelta(days=30))
        with pytest.raises(CardDataNotValidError):
            await card_validator.validate_for_create(
                CardRepository(db_session), card, owner, MASKED, today=TODAY
            )

    async def test_duplicate_number_is_rejected(self, db_session):
        """The existing row's ciphertext differs from the new one, the blind index does not."""
        holder = await UserRepository(db_session).save(
            User(username="alice", hashed_password="x", role=Role.USER)
        )
        existing = make_card()
        existing.owner_id = holder.id
        await CardRepository(db_session).save(existing)

        duplicate = make_card()
        assert duplicate.card_number_encrypted != existing.card_number_encrypted

        with pytest.raises(CardAlreadyExistsError, match=r"Card with number \*\*\*\* \*\*\*\* \*\*\*\* 4444 already exists"):
            await card_validator.validate_for_create(
                CardRepository(db_session), duplicate, holder, MASKED, today=TODAY
            )


class TestLifecycleTransitions:

    def test_block_active_card(self):
        card = card_service.block_card(make_card())
        assert card.status == CardStatus.BLOCKED

    def test_activate_blocked_card(self):
        card = card_service.activate_card(make_card(status=CardStatus.BLOCKED))
        assert card.status == CardStatus.ACTIVE

    def test_block_blocked_card_is_rejected(self):
        with pytest.raises(CardOperationNotAllowedError, match="Cannot block card with status: BLOCKED"):
            card_service.block_card(make_card(status=CardStatus.BLOCKED))

    def test_activate_active_card_is_rejected(self):
        with pytest.raises(CardOperationNotAllowedError, match="Cannot activate card with status: ACTIVE"):
            card_service.activate_card(make_card())

    def test_expired_card_cannot_be_blocked_or_activated(self):
        card = make_card(status=CardStatus.EXPIRED)
        with pytest.raises(CardOperationNotAllowedError, match="EXPIRED"):
            card_service.block_card(card)
        with pytest.raises(CardOperationNotAllowedError, match="EXPIRED"):
            card_service.activate_card(card)
        assert card.status == CardStatus.EXPIRED

    def test_expire_if_past_due(self):
        card = make_card(expiry_date=TODAY - timedelta(days=1))
        assert card_service.expire_if_past_due(card, today=TODAY) is True
        assert card.status == CardStatus.EXPIRED
        assert card_service.expire_if_past_due(card, today=TODAY) is False

    def test_card_expiring_today_is_not_expired(self):
        card = make_card(expiry_date=TODAY)
        assert card_service.expire_if_past_due(card, today=TODAY) is False
        assert card.status == CardStatus.ACTIVE

    def test_blocked_card_past_due_expires(self):
        card = make_card(status=CardStatus.BLOCKED, expiry_date=TODAY - timedelta(days=1))
        assert card_service.expire_if_past_due(card, today=TODAY) is True
        assert card.status == CardStatus.EXPIRED


class TestValidateForDelete:

    def test_blocked_card_with_zero_balance_passes(self):
        card_validator.validate_for_delete(make_card(status=CardStatus.BLOCKED))

    def test_expired_card_with_zero_balance_passes(self):
        card_validator.validate_for_delete(make_card(status=CardStatus.EXPIRED))

    def test_active_card_is_rejected(self):
        with pytest.raises(
            CardOperationNotAllowedError,
            match="Cannot delete card with status: ACTIVE. Card must be blocked first",
        ):
            card_validator.validate_for_delete(make_card())

    @pytest.mark.parametrize("status", [CardStatus.BLOCKED, CardStatus.EXPIRED])
    def test_non_zero_balance_is_rejected(self, status):
        with pytest.raises(CardOperationNotAllowedError, match="non-zero balance: 100.00"):
            card_validator.validate_for_delete(make_card(status=status, balance="100.00"))
