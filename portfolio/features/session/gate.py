"""Route guard that requires a signed-in identity."""
from portfolio.core.errors import SessionRequiredError
from portfolio.features.session.context import SessionContext

AUTH_PAGE = "/auth"


class AuthGate:
    """Checks session presence before a guarded component loads anything."""

    def __init__(self, redirect_to: str = AUTH_PAGE):
        self.redirect_to = redirect_to

    def require(self, context: SessionContext) -> str:
        """Return the signed-in identity or raise ``SessionRequiredError``."""
        if context.session is None:
            raise SessionRequiredError(redirect_to=self.redirect_to)
        return context.identity


def require_identity(context: SessionContext) -> str:
    return AuthGate().require(context)
