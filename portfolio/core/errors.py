"""Error types shared across the portfolio package.

The categories mirror how failures are surfaced to the user:

* ``FormValidationError`` - field-level, blocks submission, fixed by the user
* ``RemoteCallError`` - a store, identity or blob call failed; the provider's
  message is kept verbatim and the operation is abandoned
* ``NotFoundError`` - an unknown portfolio identity key
* ``SessionRequiredError`` - no session (or it expired); send the user to
  the auth page

Nothing is retried automatically.
"""
from typing import Dict, Optional


class PortfolioError(Exception):
    """Base class for all portfolio errors."""


class FormValidationError(PortfolioError):
    """Input failed validation; ``errors`` maps field name to message."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Invalid input for: {fields}")


class RemoteCallError(PortfolioError):
    """A call to the record store, identity provider or blob store failed."""

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(PortfolioError):
    """The requested portfolio does not exist."""


class SessionRequiredError(PortfolioError):
    """The operation needs a signed-in identity."""

    def __init__(self, message: str = "Authentication required", redirect_to: str = "/auth"):
        self.redirect_to = redirect_to
        super().__init__(message)


class WizardCompleteError(PortfolioError):
    """The wizard has finished and no longer accepts edits."""


class WizardStepError(PortfolioError):
    """The requested wizard action is not available on the current step."""
