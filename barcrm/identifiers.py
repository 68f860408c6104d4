"""Identifiers of the points context."""

from __future__ import annotations

from .errors import INVALID_ACCOUNT_ID, INVALID_MEMBER_ID
from .shared import EntityId


class AccountId(EntityId):
    """Identifier of a points account."""


class MemberId(EntityId):
    """Identifier of a member."""


def account_id_from_string(text: str) -> AccountId:
    """Parse an account id; raise a DomainError matching INVALID_ACCOUNT_ID on failure."""
    return AccountId.parse(text, INVALID_ACCOUNT_ID)


def member_id_from_string(text: str) -> MemberId:
    """Parse a member id; raise a DomainError matching INVALID_MEMBER_ID on failure."""
    return MemberId.parse(text, INVALID_MEMBER_ID)