from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from balance_frame.domain.entities.theme import GOLDIES_TOKEN_ADDRESS
from balance_frame.domain.entities.user_info import SocialProfile, TokenBalance, UserInfo
from balance_frame.domain.errors import QueryFailed
from balance_frame.domain.services.profile_selection import build_user_info

AIRSTACK_API_URL = "https://api.airstack.xyz/gql"

WALLET_QUERY = """
query WalletChecker($identity: Identity!, $tokenAddress: Address!) {
  Wallet(input: {identity: $identity, blockchain: ethereum}) {
    socials(input: {filter: {dappName: {_eq: farcaster}}}) {
      dappName
      profileName
      profileImage
    }
    tokenBalances(
      input: {filter: {tokenAddress: {_eq: $tokenAddress}}}
    ) {
      tokenAddress
      amount
      formattedAmount
    }
  }
}
"""


def _as_list(value: Any, name: str) -> list[dict[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise QueryFailed(f"Unexpected Airstack response: '{name}' is not a list")
    return [item for item in value if isinstance(item, dict)]


def parse_wallet(payload: Any) -> UserInfo:
    """Turn a decoded Airstack response body into a UserInfo."""
    if not isinstance(payload, dict):
        raise QueryFailed("Unexpected Airstack response: body is not an object")
    errors = payload.get("errors")
    if errors:
        first = errors[0] if isinstance(errors, list) else errors
        message = first.get("message") if isinstance(first, dict) else str(first)
        raise QueryFailed(f"Airstack query error: {message}")
    if "data" not in payload or not isinstance(payload["data"], dict):
        raise QueryFailed("Unexpected Airstack response: missing 'data'")

    wallet = payload["data"].get("Wallet") or {}
    if not isinstance(wallet, dict):
        raise QueryFailed("Unexpected Airstack response: 'Wallet' is not an object")

    socials = [
        SocialProfile(
            dapp_name=row.get("dappName"),
            profile_name=row.get("profileName"),
            profile_image=row.get("profileImage"),
        )
        for row in _as_list(wallet.get("socials"), "socials")
    ]
    balances = [
        TokenBalance(
            token_address=row.get("tokenAddress"),
            amount=None if row.get("amount") is None else str(row.get("amount")),
            formatted_amount=(
                None if row.get("formattedAmount") is None else str(row.get("formattedAmount"))
            ),
        )
        for row in _as_list(wallet.get("tokenBalances"), "tokenBalances")
    ]
    return build_user_info(socials, balances)


class AirstackClient:
    """Queries the Airstack GraphQL API for a wallet's socials and token balance."""

    def __init__(
        self,
        api_key: str,
        *,
        api_url: str = AIRSTACK_API_URL,
        timeout: float = 5.0,
        token_address: str = GOLDIES_TOKEN_ADDRESS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout
        self.token_address = token_address
        self._transport = transport

    def build_request_body(self, identity: str) -> dict[str, Any]:
        return {
            "query": WALLET_QUERY,
            "variables": {"identity": identity, "tokenAddress": self.token_address},
        }

    def fetch_user_info(self, identity: str) -> UserInfo:
        headers = {"Content-Type": "application/json", "Authorization": self.api_key}
        logger.info("Querying Airstack for identity {}", identity)
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(
                    self.api_url, json=self.build_request_body(identity), headers=headers
                )
        except httpx.TimeoutException as exc:
            logger.warning("Airstack request timed out for {}: {}", identity, exc)
            raise QueryFailed(f"Airstack request timed out after {self.timeout}s") from exc
        except httpx.HTTPError as exc:
            logger.warning("Airstack transport error for {}: {}", identity, exc)
            raise QueryFailed(f"Airstack request failed: {exc}") from exc

        if not response.is_success:
            logger.warning("Airstack returned HTTP {} for {}", response.status_code, identity)
            raise QueryFailed(
                f"HTTP error! status: {response.status_code}", status_code=response.status_code
            )

        logger.debug("Airstack raw response: {}", response.text)
        try:
            payload = response.json()
        except ValueError as exc:
            raise QueryFailed("Airstack response is not valid JSON") from exc
        return parse_wallet(payload)
