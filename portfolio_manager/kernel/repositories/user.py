"""
User storage. Users are created on first sign-in through an external provider.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_manager.kernel.models import User
from portfolio_manager.kernel.repositories.base import storage_errors


class UserRepository:
    entity = "user"

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, email: str, name: str, external_id: Optional[str] = None) -> User:
        with storage_errors(self.entity, "create"):
            user = User(email=email, name=name, external_id=external_id)
            self.session.add(user)
            await self.session.flush()
        return user

    async def get_by_id(self, user_id: str) -> Optional[User]:
        with storage_errors(self.entity, "get"):
            result = await self.session.execute(select(User).where(User.id == user_id))
            return result.scalar_one_or_none()

    async def get_by_external_id(self, external_id: str) -> Optional[User]:
        with storage_errors(self.entity, "get"):
            result = await self.session.execute(
                select(User).where(User.external_id == external_id)
            )
            return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        with storage_errors(self.entity, "get"):
            result = await self.session.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()

    async def update(
        self,
        user: User,
        *,
        email: Optional[str] = None,
        name: Optional[str] = None,
        external_id: Optional[str] = None,
    ) -> User:
        with storage_errors(self.entity, "update"):
            if email is not None:
                user.email = email
            if name is not None:
                user.name = name
            if external_id is not None:
                user.external_id = external_id
            await self.session.flush()
        return user
