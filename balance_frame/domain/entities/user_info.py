from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SocialProfile:
    dapp_name: str | None
    profile_name: str | None
    profile_image: str | None = None  # URL


@dataclass(frozen=True)
class TokenBalance:
    token_address: str | None
    amount: str | None
    formatted_amount: str | None


@dataclass(frozen=True)
class UserInfo:
    profile_name: str | None
    profile_image: str | None
    balance: str = "0"  # decimal as text

    @property
    def has_profile(self) -> bool:
        return self.profile_name is not None
