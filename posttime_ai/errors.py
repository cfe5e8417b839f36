"""Exceptions raised by the resolver and the platform gateway."""

from __future__ import annotations

ACCEPTED_INPUT_HINT = (
    "Enter a channel ID (UCxxxxxxxxxxxxxxxxxxxxxx), an @handle, "
    "or a channel URL such as https://www.youtube.com/@name"
)


class PostTimeError(Exception):
    """Base class for every error the core surfaces to callers."""


class NotFoundError(PostTimeError):
    """No channel matched the user's input after every lookup strategy."""

    def __init__(self, input_text: str, hint: str = ACCEPTED_INPUT_HINT):
        self.input = input_text
        self.hint = hint
        super().__init__(f"Channel not found: {input_text!r}. {hint}")


class GatewayError(PostTimeError):
    """The video platform API failed (network, auth, quota, bad payload)."""

    def __init__(
        self,
        message: str,
        status_code: int = None,
        transient: bool = False,
        retry_after: str = None,
    ):
        self.status_code = status_code
        self.transient = transient
        self.retry_after = retry_after
        super().__init__(message)
