"""DTOs for Farcaster frame action payloads and service responses."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from balance_frame.domain.entities.frame import FrameRequest


class CastId(BaseModel):
    """Cast the frame was embedded in."""
    model_config = ConfigDict(extra="ignore")

    fid: Optional[int] = Field(None, description="FID of the cast author")
    hash: Optional[str] = Field(None, description="Cast hash", example="0x31b7f0a0b2b4")


class UntrustedData(BaseModel):
    """Client-reported click data. Not signature-checked by this service."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    fid: Optional[int] = Field(None, description="Farcaster ID of the user who clicked", example=12345)
    url: Optional[str] = Field(None, description="URL of the frame")
    message_hash: Optional[str] = Field(None, alias="messageHash")
    timestamp: Optional[int] = Field(None, description="Click timestamp (ms)")
    network: Optional[int] = Field(None, description="Farcaster network id")
    button_index: Optional[int] = Field(None, alias="buttonIndex", ge=1, le=4, example=1)
    input_text: Optional[str] = Field(None, alias="inputText", description="Text input value, if any")
    state: Optional[str] = Field(None, description="Serialized frame state, if any")
    cast_id: Optional[CastId] = Field(None, alias="castId")


class TrustedData(BaseModel):
    """Signed frame action message."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    message_bytes: Optional[str] = Field(None, alias="messageBytes")


class FrameActionPayload(BaseModel):
    """Frame signature packet POSTed by a Farcaster client on button click."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    untrusted_data: Optional[UntrustedData] = Field(None, alias="untrustedData")
    trusted_data: Optional[TrustedData] = Field(None, alias="trustedData")

    def to_request(self, carried_value: str | None = None) -> FrameRequest:
        data = self.untrusted_data or UntrustedData()
        return FrameRequest(
            fid=str(data.fid) if data.fid is not None else None,
            carried_value=carried_value,
            input_text=data.input_text,
            button_index=data.button_index,
        )


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Health status", example="healthy")


class RootResponse(BaseModel):
    """Root endpoint response model."""
    status: str = Field(..., description="API status", example="ok")
    service: str = Field(..., description="Service name", example="balance-frame")
    version: str = Field(..., description="API version", example="0.1.0")
    theme: str = Field(..., description="Active frame theme", example="classic")
