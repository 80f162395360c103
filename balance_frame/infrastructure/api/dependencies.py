from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Query, Request
from loguru import logger
from pydantic import ValidationError

from balance_frame.application.dtos.frame_dto import FrameActionPayload
from balance_frame.application.use_cases.render_frame import RenderFrameUseCase
from balance_frame.config import Settings
from balance_frame.domain.entities.frame import FrameRequest
from balance_frame.domain.services.frame_machine import FrameStateMachine
from balance_frame.infrastructure.airstack.airstack_client import AirstackClient
from balance_frame.infrastructure.rendering.image_renderer import AssetFetcher, FrameImageRenderer

FRAME_PREFIX = "/api"


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


SettingsDep = Annotated[Settings, Depends(get_app_settings)]


def get_airstack_client(settings: SettingsDep) -> AirstackClient:
    return AirstackClient(
        settings.airstack_api_key,
        api_url=settings.airstack_api_url,
        timeout=settings.airstack_timeout_seconds,
    )


def get_asset_fetcher(settings: SettingsDep) -> AssetFetcher:
    return AssetFetcher(timeout=settings.asset_timeout_seconds)


def get_frame_machine(settings: SettingsDep) -> FrameStateMachine:
    return FrameStateMachine(settings.theme, text_input=settings.allow_carried_identity)


def get_renderer(
    settings: SettingsDep,
    fetcher: Annotated[AssetFetcher, Depends(get_asset_fetcher)],
) -> FrameImageRenderer:
    return FrameImageRenderer(settings.theme, fetcher)


def get_render_frame_use_case(
    settings: SettingsDep,
    machine: Annotated[FrameStateMachine, Depends(get_frame_machine)],
    client: Annotated[AirstackClient, Depends(get_airstack_client)],
) -> RenderFrameUseCase:
    return RenderFrameUseCase(
        machine=machine,
        balances=client,
        allow_carried_identity=settings.allow_carried_identity,
    )


def get_frame_base_url(request: Request, settings: SettingsDep) -> str:
    origin = settings.frame_base_url or str(request.base_url)
    return origin.rstrip("/") + FRAME_PREFIX


async def get_frame_request(
    request: Request,
    value: str | None = Query(None, description="Value carried by the clicked button"),
) -> FrameRequest:
    """Read the frame action payload; a missing or malformed body means no metadata."""
    if request.method != "POST":
        return FrameActionPayload().to_request(value)
    body = await request.body()
    if not body:
        return FrameActionPayload().to_request(value)
    try:
        payload = FrameActionPayload.model_validate_json(body)
    except ValidationError as exc:
        logger.warning("Ignoring malformed frame payload: {}", exc.errors()[:3])
        payload = FrameActionPayload()
    return payload.to_request(value)
