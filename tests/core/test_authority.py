"""Tests for peerledger.core.authority - write-once AuthorityBinding."""

from __future__ import annotations

import pytest

from peerledger.core.authority import AuthorityBinding
from peerledger.core.config import NULL_PRINCIPAL
from peerledger.core.exceptions import (
    AuthorizationException,
    ConflictError,
    ErrorCode,
    ValidationException,
)
from peerledger.core.store import StateStore


@pytest.fixture
def binding() -> AuthorityBinding:
    return AuthorityBinding(StateStore(), "identity", NULL_PRINCIPAL)


class TestAuthorityBinding:
    def test_unbound_by_default(self, binding):
        assert binding.principal is None
        assert not binding.is_bound
        assert not binding.is_authority("admin")

    def test_bind_once(self, binding):
        with binding.store.transaction():
            binding.bind("admin")
        assert binding.principal == "admin"
        assert binding.is_authority("admin")

    def test_second_bind_rejected(self, binding):
        with binding.store.transaction():
            binding.bind("admin")
        binding.store.begin()
        with pytest.raises(ConflictError) as exc_info:
            binding.bind("mallory")
        binding.store.rollback()
        assert exc_info.value.code == ErrorCode.ALREADY_BOUND
        assert binding.principal == "admin"

    @pytest.mark.parametrize("principal", ["", NULL_PRINCIPAL])
    def test_invalid_principal(self, binding, principal):
        binding.store.begin()
        with pytest.raises(ValidationException) as exc_info:
            binding.bind(principal)
        binding.store.rollback()
        assert exc_info.value.code == ErrorCode.INVALID_PRINCIPAL
        assert not binding.is_bound

    def test_require_unbound(self, binding):
        with pytest.raises(AuthorizationException) as exc_info:
            binding.require("admin")
        assert exc_info.value.code == ErrorCode.AUTHORITY_NOT_SET

    def test_require_wrong_caller(self, binding):
        with binding.store.transaction():
            binding.bind("admin")
        with pytest.raises(AuthorizationException) as exc_info:
            binding.require("mallory")
        assert exc_info.value.code == ErrorCode.NOT_AUTHORIZED
        binding.require("admin")

    def test_bindings_are_per_module(self, binding):
        other = AuthorityBinding(binding.store, "governance", NULL_PRINCIPAL)
        with binding.store.transaction():
            binding.bind("admin")
        assert other.principal is None
