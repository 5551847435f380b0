"""
Tests for resolving the caller identity from token claims.
"""

import pytest

from ticketdesk.core.exceptions import AuthenticationError
from ticketdesk.core.identity import Identity
from ticketdesk.models.user import UserRole


class TestFromClaims:
    def test_valid_claims(self):
        identity = Identity.from_claims({"sub": "12", "role": "SUPPORT"})

        assert identity == Identity(user_id=12, role=UserRole.SUPPORT)
        assert identity.is_support
        assert not identity.is_manager

    @pytest.mark.parametrize(
        "sub", [None, "", "abc", "0", "-3", str(2**31), "10000000000000000000"]
    )
    def test_bad_subject(self, sub):
        with pytest.raises(AuthenticationError):
            Identity.from_claims({"sub": sub, "role": "USER"})

    @pytest.mark.parametrize("role", [None, "", "ADMIN", "manager", "Support"])
    def test_unknown_role_is_not_defaulted(self, role):
        """Role literals are matched exactly; nothing falls back to USER."""
        with pytest.raises(AuthenticationError) as exc_info:
            Identity.from_claims({"sub": "1", "role": role})

        assert "role" in exc_info.value.message

    def test_identity_is_immutable(self):
        identity = Identity(user_id=1, role=UserRole.USER)
        with pytest.raises(AttributeError):
            identity.role = UserRole.MANAGER
