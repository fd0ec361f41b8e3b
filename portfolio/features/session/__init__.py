"""Session context and route guarding."""

from .context import SessionContext, StaleGuard
from .gate import AuthGate, require_identity

__all__ = ['SessionContext', 'StaleGuard', 'AuthGate', 'require_identity']
