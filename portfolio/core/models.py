"""SQLAlchemy models backing the record store and identity provider."""
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio.core.database import Base


def new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """Identity known to the identity provider."""
    __tablename__ = 'users'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    profile = relationship('Profile', back_populates='user', uselist=False)


class Profile(Base):
    """One portfolio owner; shares its primary key with the identity."""
    __tablename__ = 'profiles'

    id: Mapped[str] = mapped_column(String(36), ForeignKey('users.id'), primary_key=True)
    full_name: Mapped[Optional[str]] = mapped_column(String(200))
    headline: Mapped[Optional[str]] = mapped_column(String(255))
    bio: Mapped[Optional[str]] = mapped_column(Text)
    location: Mapped[Optional[str]] = mapped_column(String(200))
    email: Mapped[Optional[str]] = mapped_column(String(255))
    phone: Mapped[Optional[str]] = mapped_column(String(50))
    website: Mapped[Optional[str]] = mapped_column(String(500))
    github: Mapped[Optional[str]] = mapped_column(String(500))
    linkedin: Mapped[Optional[str]] = mapped_column(String(500))
    avatar_url: Mapped[Optional[str]] = mapped_column(String(1000))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    user = relationship('User', back_populates='profile')


class Skill(Base):
    """A named skill with a 1-5 proficiency. Names are not unique per owner."""
    __tablename__ = 'skills'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey('users.id'), index=True)
    name: Mapped[str] = mapped_column(String(200))
    proficiency: Mapped[Optional[int]]
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class Project(Base):
    """A showcased project."""
    __tablename__ = 'projects'

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey('users.id'), index=True)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text)
    image_url: Mapped[Optional[str]] = mapped_column(String(1000))
    project_url: Mapped[Optional[str]] = mapped_column(String(1000))
    github_url: Mapped[Optional[str]] = mapped_column(String(1000))
    tech_stack: Mapped[List[str]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
