"""
Integration tests for user sync and the current-user operations.
"""

import pytest

from portfolio_manager.kernel.errors import InvalidInputError, NotFoundError
from portfolio_manager.schemas import ExternalIdentity, UserUpdate


class TestSyncExternalUser:
    
    async def test_first_sign_in_creates_user(self, uow, metrics):
        """The first sign-in creates a user with a UUID."""
        async with uow() as container:
            user = await container.users.sync_external_user(
                ExternalIdentity(external_id="auth|7", email="ada@example.com", name="Ada")
            )
        
        assert user.external_id == "auth|7"
        assert len(user.id) == 36
        assert metrics.sample("entities_created_total", "user") == 1
    
    async def test_later_sign_in_refreshes_claims(self, uow, metrics):
        """A later sign-in refreshes changed email and name."""
        async with uow() as container:
            first = await container.users.sync_external_user(
                ExternalIdentity(external_id="auth|7", email="ada@example.com", name="Ada")
            )
        
        async with uow() as container:
            again = await container.users.sync_external_user(
                ExternalIdentity(external_id="auth|7", email="ada@lovelace.dev", name="Ada L.")
            )
        
        assert again.id == first.id
        assert (again.email, again.name) == ("ada@lovelace.dev", "Ada L.")
        assert metrics.sample("entities_updated_total", "user") == 1
    
    async def test_unchanged_claims_write_nothing(self, uow, metrics):
        """Signing in with the same claims records no update."""
        identity = ExternalIdentity(external_id="auth|7", email="ada@example.com", name="Ada")
        async with uow() as container:
            await container.users.sync_external_user(identity)
        async with uow() as container:
            await container.users.sync_external_user(identity)
        
        assert metrics.sample("entities_updated_total", "user") == 0
    
    async def test_existing_email_is_linked(self, uow):
        """A user without an external ID is linked by email."""
        async with uow() as container:
            legacy = await container.user_repository.create(email="old@example.com", name="Old")
        
        async with uow() as container:
            user = await container.users.sync_external_user(
                ExternalIdentity(external_id="auth|9", email="old@example.com", name="Old")
            )
        
        assert user.id == legacy.id
        assert user.external_id == "auth|9"
    
    async def test_claims_are_required(self, uow):
        """An identity without an email is rejected."""
        with pytest.raises(InvalidInputError):
            async with uow() as container:
                await container.users.sync_external_user(ExternalIdentity(external_id="auth|7", name="Ada"))


class TestCurrentUser:
    
    async def test_get(self, uow, u1):
        """The current user reads back by ID."""
        async with uow() as container:
            user = await container.users.get_current_user(u1)
        
        assert user.email == "u1@example.com"
    
    async def test_get_missing(self, uow):
        """An unknown user ID is not found."""
        with pytest.raises(NotFoundError):
            async with uow() as container:
                await container.users.get_current_user("no-such-user")
    
    async def test_update_changes_name_only(self, uow, u1):
        """Updating the current user trims the name and keeps the email."""
        async with uow() as container:
            user = await container.users.update_current_user(u1, UserUpdate(name="  Renamed "))
        
        assert user.name == "Renamed"
        assert user.email == "u1@example.com"
    
    async def test_update_requires_name(self, uow, u1):
        """A blank name is rejected."""
        with pytest.raises(InvalidInputError):
            async with uow() as container:
                await container.users.update_current_user(u1, UserUpdate(name=""))
