"""Public, read-only portfolio of one owner."""
from typing import List, Union

from pydantic import BaseModel

from portfolio.core.logging import setup_logging
from portfolio.core.schemas import ProfileRecord, ProjectRecord, SkillRecord
from portfolio.core.store import NOT_FOUND, RecordStore

logger = setup_logging('public_view')


class PortfolioView(BaseModel):
    found: bool = True
    profile: ProfileRecord
    skills: List[SkillRecord]
    projects: List[ProjectRecord]


class NotFoundState(BaseModel):
    found: bool = False
    title: str = "Portfolio Not Found"
    message: str = "The requested portfolio does not exist or is not available."


def load_portfolio(store: RecordStore, identity_key: str) -> Union[PortfolioView, NotFoundState]:
    """Profile, projects (newest first) and skills (most proficient first).

    An unknown key gives ``NotFoundState``; any other store error is raised
    as ``RemoteCallError``.
    """
    profile = store.select_one('profiles', {'id': identity_key})
    if profile.error is not None and profile.error.code == NOT_FOUND:
        logger.info(f"No portfolio for {identity_key}")
        return NotFoundState()
    profile_row = profile.raise_for_error()

    projects = store.select(
        'projects', {'user_id': identity_key}, order_by='created_at', descending=True,
    ).raise_for_error()
    skills = store.select(
        'skills', {'user_id': identity_key}, order_by='proficiency', descending=True,
    ).raise_for_error()

    return PortfolioView(
        profile=ProfileRecord.from_row(profile_row),
        skills=[SkillRecord.from_row(row) for row in skills],
        projects=[ProjectRecord.from_row(row) for row in projects],
    )
