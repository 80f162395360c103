from __future__ import annotations

from typing import Sequence, TypeVar

from balance_frame.domain.entities.user_info import SocialProfile, TokenBalance, UserInfo

T = TypeVar("T")


def select_primary(entries: Sequence[T] | None) -> T | None:
    """Pick the primary entry of an indexer list.

    The indexer returns its most relevant match first, so the first element
    wins. ``None`` and empty lists both mean "no match".
    """
    if not entries:
        return None
    return entries[0]


def build_user_info(
    socials: Sequence[SocialProfile] | None,
    balances: Sequence[TokenBalance] | None,
) -> UserInfo:
    profile = select_primary(socials)
    balance = select_primary(balances)
    amount = "0"
    if balance is not None:
        # raw amount is in base units, still better than reporting zero
        for candidate in (balance.formatted_amount, balance.amount):
            if candidate not in (None, ""):
                amount = str(candidate)
                break
    return UserInfo(
        profile_name=profile.profile_name if profile else None,
        profile_image=profile.profile_image if profile else None,
        balance=amount,
    )
