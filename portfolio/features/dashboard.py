"""Dashboard: projects and skills tabs for the signed-in owner."""
from enum import Enum
from typing import Callable, List, Optional

from portfolio.core.auth import AuthSession
from portfolio.core.logging import setup_logging
from portfolio.core.store import RecordStore
from portfolio.features.lists import ProjectsList, SkillsList
from portfolio.features.session import AuthGate, SessionContext, StaleGuard

logger = setup_logging('dashboard')


class DashboardTab(str, Enum):
    PROJECTS = "projects"
    SKILLS = "skills"


class Dashboard:
    """Composes the two lists behind the auth gate.

    ``mount`` checks the session before anything is fetched; without one it
    raises ``SessionRequiredError`` and no store call is made. Once mounted,
    a sign-out seen through the session context sets ``redirect_to`` and
    any load still in flight is discarded.
    """

    def __init__(self, context: SessionContext, store: RecordStore, gate: Optional[AuthGate] = None):
        self.context = context
        self.store = store
        self.gate = gate or AuthGate()
        self.active_tab = DashboardTab.PROJECTS
        self.projects: Optional[ProjectsList] = None
        self.skills: Optional[SkillsList] = None
        self.loading = False
        self.mounted = False
        self.redirect_to: Optional[str] = None
        self._guards: List[StaleGuard] = []
        self._unsubscribe: Optional[Callable[[], None]] = None

    def mount(self) -> "Dashboard":
        identity = self.gate.require(self.context)
        self.mounted = True
        self._unsubscribe = self.context.subscribe(self._on_session_change)
        self.projects = ProjectsList(self.store, identity)
        self.skills = SkillsList(self.store, identity)
        self.refresh()
        return self

    def refresh(self):
        """Reload both lists; results are applied only if still current."""
        if not self.mounted:
            return
        guard = self.context.guard()
        self._guards.append(guard)
        self.loading = True
        try:
            self.projects.fetch(guard)
            self.skills.fetch(guard)
        finally:
            self.loading = False
            self._guards.remove(guard)

    def select_tab(self, tab: str) -> DashboardTab:
        self.active_tab = DashboardTab(tab)
        return self.active_tab

    def unmount(self):
        for guard in self._guards:
            guard.cancel()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.mounted = False

    def _on_session_change(self, session: Optional[AuthSession]):
        if session is None:
            logger.info("Session ended while dashboard mounted; redirecting to auth")
            for guard in self._guards:
                guard.cancel()
            self.redirect_to = self.gate.redirect_to

    def to_dict(self) -> dict:
        return {
            'active_tab': self.active_tab.value,
            'tabs': [tab.value for tab in DashboardTab],
            'projects': [p.model_dump() for p in self.projects.items] if self.projects else [],
            'skills': [s.model_dump() for s in self.skills.items] if self.skills else [],
            'redirect_to': self.redirect_to,
        }
