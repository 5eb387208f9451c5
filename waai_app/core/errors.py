"""Exception hierarchy shared by the stores, gates, quiz engine, API and UI."""

from __future__ import annotations

GENERIC_FAILURE_MESSAGE = "Something went wrong. Please try again later."


class WaaiError(Exception):
    """Base class for every error raised by the core."""

    @property
    def user_message(self) -> str:
        """Text that is safe to show to a teacher or child."""
        return str(self) or GENERIC_FAILURE_MESSAGE


class AuthError(WaaiError):
    """Bad credentials, duplicate account, or no signed-in teacher."""


class ValidationError(WaaiError):
    """A user-supplied value breaks a record invariant."""


class NotFoundError(WaaiError):
    """A child or activity id does not resolve to a loaded record."""


class GateMismatchError(WaaiError):
    """A PIN entry or PIN confirmation did not match."""


class GatewayError(WaaiError):
    """The persistence gateway was unavailable or refused the request."""

    @property
    def user_message(self) -> str:
        # the internal cause stays in the logs
        return GENERIC_FAILURE_MESSAGE


class ReadError(GatewayError):
    pass


class WriteError(GatewayError):
    pass
