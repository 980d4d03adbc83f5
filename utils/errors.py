"""
utils/errors.py
-----------------
Exceptions raised by models and flows. Controllers catch them and turn
them into flashed messages.
"""

from pydantic import ValidationError


class JanSetuError(Exception):
    """Base class for every application error."""


class NotFoundError(JanSetuError):
    pass


class InvalidTransitionError(JanSetuError):
    """A beneficiary status change that is not Pending -> Approved/Rejected."""


class DuplicateBeneficiaryError(JanSetuError):
    pass


class VerificationError(JanSetuError):
    """A vendor verification that did not produce a match."""


class MediaError(JanSetuError):
    """Photo or audio payload could not be decoded."""


class ModelUnavailableError(JanSetuError):
    """The external model is not configured or could not be reached."""


class ModelResponseError(JanSetuError):
    """The external model replied with something we cannot parse."""


def describe_error(error):
    """Short user-facing text for an exception caught at a controller."""
    if isinstance(error, ValidationError):
        parts = []
        for item in error.errors():
            field = ".".join(str(p) for p in item.get("loc", ())) or "input"
            parts.append(f"{field}: {item.get('msg')}")
        return "Invalid input - " + "; ".join(parts)
    return str(error) or error.__class__.__name__
