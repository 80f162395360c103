from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from balance_frame.domain.entities.frame import FrameRequest, FrameRoute, ViewDescription
from balance_frame.domain.errors import IdentityUnavailable, ProfileNotFound, QueryFailed
from balance_frame.domain.services.frame_machine import FrameStateMachine
from balance_frame.infrastructure.airstack.airstack_client import AirstackClient


def resolve_identity(request: FrameRequest, allow_carried: bool = False) -> str:
    """Pick the identity to look up for a request.

    By default only platform metadata (the clicking user's FID) is used.
    With ``allow_carried`` set, a name typed into the frame text input wins,
    then a value carried on the clicked button, then the FID; anyone can
    craft the first two, so they are off unless enabled.
    """
    if allow_carried:
        for candidate in (request.input_text, request.carried_value):
            if candidate and candidate.strip():
                return candidate.strip()
    if request.fid:
        return request.fid
    raise IdentityUnavailable()


@dataclass
class RenderFrameUseCase:
    """
    Run one step of the frame flow.

    Each call is independent: the state comes from the route, the identity
    from the request, and the result is a fresh view. Lookup and identity
    failures become the error view rather than propagating.
    """

    machine: FrameStateMachine
    balances: AirstackClient
    allow_carried_identity: bool = False

    def execute(self, route: FrameRoute, request: FrameRequest) -> ViewDescription:
        if route is FrameRoute.HOME:
            return self.machine.home()
        if route is FrameRoute.CHECKING:
            return self._checking(request)
        return self._result(request)

    def _checking(self, request: FrameRequest) -> ViewDescription:
        try:
            identity = resolve_identity(request, self.allow_carried_identity)
        except IdentityUnavailable as exc:
            logger.info("No identity on check request")
            return self.machine.error(exc, retry=FrameRoute.CHECKING)
        logger.info("Checking frame for identity {}", identity)
        return self.machine.checking(identity)

    def _result(self, request: FrameRequest) -> ViewDescription:
        try:
            identity = resolve_identity(request, self.allow_carried_identity)
        except IdentityUnavailable as exc:
            logger.info("No identity on result request, skipping lookup")
            return self.machine.error(exc, retry=FrameRoute.CHECKING)

        try:
            info = self.balances.fetch_user_info(identity)
        except QueryFailed as exc:
            logger.warning("Balance lookup failed for {}: {}", identity, exc.message)
            return self.machine.error(exc, retry=FrameRoute.RESULT, identity=identity)

        if not info.has_profile:
            logger.info("No profile found for {}", identity)
            return self.machine.error(ProfileNotFound(identity), retry=FrameRoute.RESULT, identity=identity)

        logger.info("Rendering result for {} (balance {})", identity, info.balance)
        return self.machine.result(identity, info)
