"""
===============================================================================
USER USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Business Goal:
    Modelos de resultado para la administración de usuarios (ADMIN).

Notas:
    - DuplicateUsernameError y UnknownRoleError llegan desde la transacción
      y se traducen a UserError con su mensaje estable.
    - Fallas de infraestructura NO se traducen: propagan como DatabaseError
      y terminan en un 500 genérico.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ....domain.entities import Role, UserSummary
from ....domain.errors import DomainRuleViolation, RuleErrorCode

UserErrorCode = RuleErrorCode


@dataclass(frozen=True)
class UserError:
    code: UserErrorCode
    message: str

    @classmethod
    def from_violation(cls, exc: DomainRuleViolation) -> "UserError":
        return cls(code=exc.code, message=exc.message)

    @classmethod
    def validation(cls, message: str) -> "UserError":
        return cls(code=UserErrorCode.VALIDATION_ERROR, message=message)


@dataclass
class UserListResult:
    users: List[UserSummary] = field(default_factory=list)
    error: UserError | None = None


@dataclass
class RoleListResult:
    roles: List[Role] = field(default_factory=list)


@dataclass
class CreateUserResult:
    user_id: int | None = None
    error: UserError | None = None


@dataclass
class UpdateUserResult:
    updated: bool = False
    error: UserError | None = None
