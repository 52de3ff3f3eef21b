"""
User use cases.

Authentication happens outside the core. Once a caller has been
authenticated by the external provider, the boundary hands over the
provider's claims and the matching local user is fetched or created.
"""

from typing import Optional

from portfolio_manager.kernel.errors import NotFoundError, require_text
from portfolio_manager.kernel.events.audit import AuditRecorder
from portfolio_manager.kernel.metrics.collector import MetricsRecorder
from portfolio_manager.kernel.repositories.user import UserRepository
from portfolio_manager.logging_config import get_logger
from portfolio_manager.schemas.user import ExternalIdentity, UserResponse, UserUpdate

logger = get_logger(__name__)

ENTITY = "user"


class UserService:
    """
    Service for local user records.

    Usage:
        users = UserService(UserRepository(session), audit, metrics)
        user = await users.sync_external_user(
            ExternalIdentity(external_id="auth0|42", email="a@b.c", name="Ada")
        )
    """

    def __init__(
        self,
        repository: UserRepository,
        audit: AuditRecorder,
        metrics: Optional[MetricsRecorder] = None,
    ):
        self.repository = repository
        self.audit = audit
        self.metrics = metrics

    async def sync_external_user(self, identity: ExternalIdentity) -> UserResponse:
        """
        Get or create the local user for an authenticated external identity.

        An existing user has email and name refreshed from the claims. A user
        created before external sign-in existed is linked by email.

        Args:
            identity: Claims from the external provider

        Returns:
            The local user
        """
        external_id = require_text(identity.external_id, "external ID", entity=ENTITY, operation="sync")
        email = require_text(identity.email, "email", entity=ENTITY, operation="sync").strip()
        name = require_text(identity.name, "name", entity=ENTITY, operation="sync").strip()

        user = await self.repository.get_by_external_id(external_id)
        if user is None:
            user = await self.repository.get_by_email(email)
            if user is not None and user.external_id is not None:
                user = None

        if user is None:
            user = await self.repository.create(email=email, name=name, external_id=external_id)
            await self.audit.log_create(
                ENTITY, user.id, {"email": email, "name": name, "external_id": external_id}, user_id=user.id
            )
            if self.metrics is not None:
                self.metrics.increment_created(ENTITY)
            logger.info("User created from external identity", extra={"user_id": user.id})
            return UserResponse.model_validate(user)

        if (user.email, user.name, user.external_id) != (email, name, external_id):
            await self.repository.update(user, email=email, name=name, external_id=external_id)
            await self.audit.log_update(ENTITY, user.id, {"email": email, "name": name}, user_id=user.id)
            if self.metrics is not None:
                self.metrics.increment_updated(ENTITY)
        return UserResponse.model_validate(user)

    async def get_current_user(self, user_id: str) -> UserResponse:
        require_text(user_id, "user ID", entity=ENTITY, operation="get")
        user = await self.repository.get_by_id(user_id)
        if user is None:
            raise NotFoundError("user not found", entity=ENTITY, operation="get", details={"id": user_id})
        return UserResponse.model_validate(user)

    async def update_current_user(self, user_id: str, data: UserUpdate) -> UserResponse:
        """Rename the current user. Email follows the external provider and is not editable."""
        require_text(user_id, "user ID", entity=ENTITY, operation="update")
        name = require_text(data.name, "name", entity=ENTITY, operation="update").strip()

        user = await self.repository.get_by_id(user_id)
        if user is None:
            raise NotFoundError("user not found", entity=ENTITY, operation="update", details={"id": user_id})

        await self.repository.update(user, name=name)
        await self.audit.log_update(ENTITY, user_id, {"name": name}, user_id=user_id)
        if self.metrics is not None:
            self.metrics.increment_updated(ENTITY)
        return UserResponse.model_validate(user)
