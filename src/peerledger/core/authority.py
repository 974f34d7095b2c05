"""Write-once authority binding.

Each module owns one binding cell. The first successful ``bind`` fixes the
controlling principal for the lifetime of the module; there is no rebind
and no unbind. Privileged configuration and validation paths call
``require`` with the caller before touching state.
"""

from __future__ import annotations

import logging

from .exceptions import AuthorizationException, ConflictError, ErrorCode, ValidationException
from .store import StateStore

logger = logging.getLogger(__name__)


class AuthorityBinding:
    """Write-once controlling principal for one module."""

    def __init__(self, store: StateStore, module: str, null_principal: str):
        self.store = store
        self.module = module
        self.null_principal = null_principal
        self._key = f"{module}.authority"
        store.seed_scalar(self._key, None)

    @property
    def principal(self) -> str | None:
        return self.store.get_scalar(self._key)

    @property
    def is_bound(self) -> bool:
        return self.principal is not None

    def bind(self, principal: str) -> str:
        """Set the authority. Fails if the principal is the null identity or a binding exists."""
        if not principal or principal == self.null_principal:
            raise ValidationException(
                f"{principal!r} cannot be bound as the {self.module} authority",
                code=ErrorCode.INVALID_PRINCIPAL,
                field="principal",
                value=principal,
            )
        if self.is_bound:
            raise ConflictError(
                f"The {self.module} authority is already bound",
                ErrorCode.ALREADY_BOUND,
                existing_id=self.principal,
            )
        self.store.set_scalar(self._key, principal)
        logger.info("Bound %s authority to %s", self.module, principal)
        return principal

    def require(self, caller: str) -> None:
        """Fail unless ``caller`` is the bound authority."""
        authority = self.principal
        if authority is None:
            raise AuthorizationException(
                f"No {self.module} authority has been bound",
                code=ErrorCode.AUTHORITY_NOT_SET,
            )
        if caller != authority:
            raise AuthorizationException(
                f"{caller} is not the {self.module} authority",
                code=ErrorCode.NOT_AUTHORIZED,
                principal=caller,
            )

    def is_authority(self, caller: str) -> bool:
        return self.principal is not None and caller == self.principal
