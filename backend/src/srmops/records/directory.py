"""Read-only access to the authentication service's user accounts.

The identity schema (users, sessions, accounts, organizations) is owned by
the external authentication service. This module only exposes the one
capability the service needs from it: listing user accounts.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column

from ..db import Base


class AuthUser(Base):
    """Mapping of the authentication service's ``user`` table (never written)."""

    __tablename__ = "user"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text)
    email: Mapped[str] = mapped_column(Text, unique=True)
    email_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    role: Mapped[str] = mapped_column(String(32), default="default")
    created_at: Mapped[datetime] = mapped_column(DateTime)
    updated_at: Mapped[datetime] = mapped_column(DateTime)


@dataclass(frozen=True)
class UserAccount:
    """A user account as seen by this service."""

    id: str
    email: str
    name: str | None
    email_verified: bool
    created_at: datetime | None


class UserDirectory(ABC):
    """Capability: enumerate all user accounts."""

    @abstractmethod
    async def list_users(self) -> list[UserAccount]:
        """Return every known user account, oldest first."""
        ...


class SqlUserDirectory(UserDirectory):
    """User directory backed by the identity ``user`` table."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def list_users(self) -> list[UserAccount]:
        result = await self._session.execute(
            select(AuthUser).order_by(AuthUser.created_at)
        )
        return [
            UserAccount(
                id=row.id,
                email=row.email,
                name=row.name,
                email_verified=bool(row.email_verified),
                created_at=row.created_at,
            )
            for row in result.scalars().all()
        ]
