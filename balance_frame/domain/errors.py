from __future__ import annotations


class FrameError(Exception):
    """Base error rendered as the frame error view."""

    title = "Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class IdentityUnavailable(FrameError):
    """No identity could be resolved for the request."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or "Unable to retrieve your Farcaster ID. Please ensure you have a valid Farcaster profile."
        )


class QueryFailed(FrameError):
    """The indexing API call failed or returned an unusable body."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProfileNotFound(FrameError):
    def __init__(self, identity: str) -> None:
        super().__init__(f"No Farcaster profile found for {identity}.")
        self.identity = identity


class ConfigurationError(RuntimeError):
    """Raised at startup when required settings are missing or invalid."""
