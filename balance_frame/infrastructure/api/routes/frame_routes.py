from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from starlette.concurrency import run_in_threadpool

from balance_frame.application.use_cases.render_frame import RenderFrameUseCase
from balance_frame.domain.entities.frame import FrameRequest, FrameRoute, ViewDescription
from balance_frame.infrastructure.api.dependencies import (
    FRAME_PREFIX,
    get_frame_base_url,
    get_frame_request,
    get_render_frame_use_case,
    get_renderer,
)
from balance_frame.infrastructure.rendering.frame_html import build_frame_html
from balance_frame.infrastructure.rendering.image_renderer import FrameImageRenderer, to_data_uri

router = APIRouter(
    prefix=FRAME_PREFIX,
    tags=["Frames"],
    responses={
        200: {"description": "Farcaster frame document", "content": {"text/html": {}}},
    },
)

UseCaseDep = Annotated[RenderFrameUseCase, Depends(get_render_frame_use_case)]
RendererDep = Annotated[FrameImageRenderer, Depends(get_renderer)]
FrameRequestDep = Annotated[FrameRequest, Depends(get_frame_request)]
BaseUrlDep = Annotated[str, Depends(get_frame_base_url)]


def _to_html(view: ViewDescription, renderer: FrameImageRenderer, base_url: str) -> HTMLResponse:
    image_src = to_data_uri(renderer.render(view))
    html = build_frame_html(view, image_src, base_url)
    return HTMLResponse(content=html, headers={"Cache-Control": "no-store"})


async def _step(
    route: FrameRoute,
    frame_request: FrameRequest,
    use_case: RenderFrameUseCase,
    renderer: FrameImageRenderer,
    base_url: str,
) -> HTMLResponse:
    # lookup and image rendering both block; keep them off the event loop
    view = await run_in_threadpool(use_case.execute, route, frame_request)
    return await run_in_threadpool(_to_html, view, renderer, base_url)


@router.api_route(
    "",
    methods=["GET", "POST"],
    response_class=HTMLResponse,
    summary="Home Frame",
    description="""
    Initial frame: title, instructions and a **Check Balance** button.

    Served on GET for the first load and on POST when a user navigates back.
    """,
)
async def home_frame(
    frame_request: FrameRequestDep,
    use_case: UseCaseDep,
    renderer: RendererDep,
    base_url: BaseUrlDep,
):
    """Render the home frame."""
    return await _step(FrameRoute.HOME, frame_request, use_case, renderer, base_url)


@router.api_route(
    "/check",
    methods=["GET", "POST"],
    response_class=HTMLResponse,
    summary="Checking Frame",
    description="""
    Echo the resolved identity and offer **Show Balance** / **Back**.

    Renders the error frame when no identity can be resolved.
    """,
)
async def check_frame(
    frame_request: FrameRequestDep,
    use_case: UseCaseDep,
    renderer: RendererDep,
    base_url: BaseUrlDep,
):
    """Render the checking frame."""
    return await _step(FrameRoute.CHECKING, frame_request, use_case, renderer, base_url)


@router.api_route(
    "/result",
    methods=["GET", "POST"],
    response_class=HTMLResponse,
    summary="Result Frame",
    description="""
    Look up the profile and token balance for the resolved identity.

    **Outcomes:**
    - Profile found: name, optional avatar and balance, with **Back** / **Refresh**
    - No profile, no identity or a failed lookup: error frame with **Back** / **Retry**
    """,
)
async def result_frame(
    frame_request: FrameRequestDep,
    use_case: UseCaseDep,
    renderer: RendererDep,
    base_url: BaseUrlDep,
):
    """Render the result frame."""
    return await _step(FrameRoute.RESULT, frame_request, use_case, renderer, base_url)
