"""
Auth Service Tests
------------------
Login, me, logout and register against an in-memory credential store,
a frozen clock and the in-memory revocation registry.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from app.auth.auth_service import (
    EMAIL_TAKEN_MESSAGE,
    UNAUTHENTICATED_MESSAGE,
    UNAUTHORIZED_MESSAGE,
    USER_CREATED_MESSAGE,
    USER_NOT_CREATED_MESSAGE,
    AuthService,
    RegistrationErrorKind,
)
from app.auth.exceptions import (
    InfrastructureError,
    RevocationStoreError,
    UnauthenticatedError,
    UnauthorizedError,
)
from app.auth.jwt_utils import TokenCodec
from app.auth.models import AuthTokenResponse


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_success(self, auth_service, registered_user, token_codec):
        response = await auth_service.login(registered_user["email"], "correct-horse")

        assert isinstance(response, AuthTokenResponse)
        assert response.token_type == "bearer"
        assert response.expires_in == 3600
        claims = token_codec.verify(response.access_token)
        assert claims.subject == str(registered_user["user_id"])

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, auth_service, registered_user):
        with pytest.raises(UnauthorizedError) as exc_info:
            await auth_service.login(registered_user["email"], "wrong")

        assert str(exc_info.value) == UNAUTHORIZED_MESSAGE

    @pytest.mark.asyncio
    async def test_login_unknown_email_same_error(self, auth_service, registered_user):
        """Unknown email and wrong password are indistinguishable."""
        with pytest.raises(UnauthorizedError) as unknown:
            await auth_service.login("nobody@example.com", "correct-horse")
        with pytest.raises(UnauthorizedError) as wrong:
            await auth_service.login(registered_user["email"], "wrong")

        assert str(unknown.value) == str(wrong.value)

    @pytest.mark.asyncio
    async def test_login_store_failure(self, auth_service, credential_store):
        credential_store.fail_with = ConnectionError("db down")

        with pytest.raises(InfrastructureError):
            await auth_service.login("jane@example.com", "correct-horse")

    @pytest.mark.asyncio
    async def test_login_store_failure_with_braces_in_message(
        self, auth_service, credential_store
    ):
        # DBAPI errors render their bound parameters as a dict literal
        credential_store.fail_with = RuntimeError(
            "(asyncpg.exceptions.PostgresError) [parameters: {'email': 'jane@example.com'}]"
        )

        with pytest.raises(InfrastructureError) as exc_info:
            await auth_service.login("jane@example.com", "correct-horse")

        assert exc_info.value.__cause__ is credential_store.fail_with

    @pytest.mark.asyncio
    async def test_each_login_issues_distinct_token(self, auth_service, registered_user):
        first = await auth_service.login(registered_user["email"], "correct-horse")
        second = await auth_service.login(registered_user["email"], "correct-horse")

        assert first.access_token != second.access_token


class TestMe:
    @pytest.mark.asyncio
    async def test_me_returns_user(self, auth_service, registered_user):
        tokens = await auth_service.login(registered_user["email"], "correct-horse")

        user = await auth_service.me(tokens.access_token)

        assert user["user_id"] == registered_user["user_id"]
        assert user["email"] == "jane@example.com"
        assert user["name"] == "Jane Doe"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, "", "garbage", "a.b.c"])
    async def test_me_invalid_token(self, auth_service, token):
        with pytest.raises(UnauthenticatedError) as exc_info:
            await auth_service.me(token)

        assert str(exc_info.value) == UNAUTHENTICATED_MESSAGE

    @pytest.mark.asyncio
    async def test_me_expired_token(self, auth_service, registered_user, clock):
        tokens = await auth_service.login(registered_user["email"], "correct-horse")
        clock.advance(3600)

        with pytest.raises(UnauthenticatedError):
            await auth_service.me(tokens.access_token)

    @pytest.mark.asyncio
    async def test_me_user_deleted(self, auth_service, registered_user, credential_store):
        tokens = await auth_service.login(registered_user["email"], "correct-horse")
        credential_store.users.clear()

        with pytest.raises(UnauthenticatedError):
            await auth_service.me(tokens.access_token)

    @pytest.mark.asyncio
    async def test_me_non_uuid_subject(self, auth_service, token_codec):
        token = token_codec.issue("not-a-uuid").access_token

        with pytest.raises(UnauthenticatedError):
            await auth_service.me(token)

    @pytest.mark.asyncio
    async def test_me_store_failure(self, auth_service, registered_user, credential_store):
        tokens = await auth_service.login(registered_user["email"], "correct-horse")
        credential_store.fail_with = ConnectionError("db down")

        with pytest.raises(InfrastructureError):
            await auth_service.me(tokens.access_token)

    @pytest.mark.asyncio
    async def test_me_fails_closed_when_registry_unavailable(
        self, credential_store, token_codec, registered_user
    ):
        registry = MagicMock()
        registry.is_revoked = AsyncMock(side_effect=RevocationStoreError("down"))
        service = AuthService(credential_store, token_codec, registry)
        tokens = await service.login(registered_user["email"], "correct-horse")

        with pytest.raises(UnauthenticatedError):
            await service.me(tokens.access_token)


class TestLogout:
    @pytest.mark.asyncio
    async def test_logout_revokes_token(self, auth_service, registered_user, revocation_registry):
        tokens = await auth_service.login(registered_user["email"], "correct-horse")

        await auth_service.logout(tokens.access_token)

        assert len(revocation_registry) == 1
        with pytest.raises(UnauthenticatedError):
            await auth_service.me(tokens.access_token)

    @pytest.mark.asyncio
    async def test_logout_only_revokes_presented_token(self, auth_service, registered_user):
        first = await auth_service.login(registered_user["email"], "correct-horse")
        second = await auth_service.login(registered_user["email"], "correct-horse")

        await auth_service.logout(first.access_token)

        user = await auth_service.me(second.access_token)
        assert user["user_id"] == registered_user["user_id"]

    @pytest.mark.asyncio
    async def test_logout_twice_rejected(self, auth_service, registered_user):
        tokens = await auth_service.login(registered_user["email"], "correct-horse")
        await auth_service.logout(tokens.access_token)

        with pytest.raises(UnauthenticatedError):
            await auth_service.logout(tokens.access_token)

    @pytest.mark.asyncio
    async def test_logout_invalid_token(self, auth_service, revocation_registry):
        with pytest.raises(UnauthenticatedError):
            await auth_service.logout("garbage")

        assert len(revocation_registry) == 0

    @pytest.mark.asyncio
    async def test_logout_expired_token(self, auth_service, registered_user, clock):
        tokens = await auth_service.login(registered_user["email"], "correct-horse")
        clock.advance(7200)

        with pytest.raises(UnauthenticatedError):
            await auth_service.logout(tokens.access_token)

    @pytest.mark.asyncio
    async def test_revocation_outlives_registry_entry_only_until_expiry(
        self, auth_service, registered_user, revocation_registry, clock
    ):
        """After expiry the entry is swept, yet the token stays unusable."""
        tokens = await auth_service.login(registered_user["email"], "correct-horse")
        await auth_service.logout(tokens.access_token)
        clock.advance(3600)

        assert await revocation_registry.sweep() == 1
        with pytest.raises(UnauthenticatedError):
            await auth_service.me(tokens.access_token)

    @pytest.mark.asyncio
    async def test_logout_store_write_failure(self, credential_store, token_codec, registered_user):
        registry = MagicMock()
        registry.is_revoked = AsyncMock(return_value=False)
        registry.revoke = AsyncMock(side_effect=RevocationStoreError("down"))
        service = AuthService(credential_store, token_codec, registry)
        tokens = await service.login(registered_user["email"], "correct-horse")

        with pytest.raises(InfrastructureError):
            await service.logout(tokens.access_token)


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_success(self, auth_service, credential_store):
        result = await auth_service.register("new@example.com", "pw-123", "New User")

        assert result.ok is True
        assert result.message == USER_CREATED_MESSAGE
        assert result.user["email"] == "new@example.com"
        assert result.user["name"] == "New User"
        assert "password_hash" not in result.user

        stored = credential_store.users[result.user["user_id"]]
        assert stored["password_hash"] != "pw-123"
        assert stored["password_hash"].startswith("$2")

    @pytest.mark.asyncio
    async def test_register_then_login(self, auth_service):
        await auth_service.register("new@example.com", "pw-123", "New User")

        tokens = await auth_service.login("new@example.com", "pw-123")
        user = await auth_service.me(tokens.access_token)

        assert user["email"] == "new@example.com"

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, auth_service, registered_user, credential_store):
        result = await auth_service.register(registered_user["email"], "other", "Someone")

        assert result.ok is False
        assert result.error_kind == RegistrationErrorKind.CONFLICT
        assert result.message == EMAIL_TAKEN_MESSAGE
        assert result.user is None
        assert len(credential_store.users) == 1

    @pytest.mark.asyncio
    async def test_register_store_failure(self, auth_service, credential_store):
        credential_store.fail_with = ConnectionError("db down")

        result = await auth_service.register("new@example.com", "pw-123", "New User")

        assert result.ok is False
        assert result.error_kind == RegistrationErrorKind.INFRASTRUCTURE
        assert result.message == USER_NOT_CREATED_MESSAGE

    @pytest.mark.asyncio
    async def test_register_store_failure_with_braces_in_message(
        self, auth_service, credential_store
    ):
        credential_store.fail_with = RuntimeError(
            "(sqlalchemy.exc.DBAPIError) [parameters: {'user_id': 1}]"
        )

        result = await auth_service.register("new@example.com", "pw-123", "New User")

        assert result.ok is False
        assert result.error_kind == RegistrationErrorKind.INFRASTRUCTURE
        assert result.message == USER_NOT_CREATED_MESSAGE

    @pytest.mark.asyncio
    async def test_register_mixed_case_email_can_log_in(self, auth_service):
        result = await auth_service.register("  Mixed@Example.COM", "pw-123", "Mixed")

        assert result.ok is True
        assert result.user["email"] == "mixed@example.com"

        tokens = await auth_service.login("Mixed@Example.COM", "pw-123")
        user = await auth_service.me(tokens.access_token)
        assert user["user_id"] == result.user["user_id"]

    @pytest.mark.asyncio
    async def test_register_email_differing_only_in_case_conflicts(
        self, auth_service, registered_user, credential_store
    ):
        result = await auth_service.register("JANE@Example.com", "other", "Jane Two")

        assert result.ok is False
        assert result.error_kind == RegistrationErrorKind.CONFLICT
        assert len(credential_store.users) == 1


class TestTokenIsolation:
    @pytest.mark.asyncio
    async def test_token_from_other_key_rejected(
        self, auth_service, registered_user, clock
    ):
        foreign = TokenCodec(
            signing_key="someone-elses-key", algorithm="HS256", ttl_seconds=60, clock=clock
        )
        token = foreign.issue(uuid4()).access_token

        with pytest.raises(UnauthenticatedError):
            await auth_service.me(token)
