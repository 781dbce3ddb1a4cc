"""
Name: In-Memory User Repository Tests

Responsibilities:
  - Transactional all-or-nothing semantics (user + roles)
  - Active-username uniqueness (case-insensitive)
  - Active roles exposed for the expediente re-check
"""

import pytest
from sii_dicri.domain.entities import NewUser, UserChanges, UserRole
from sii_dicri.domain.errors import DuplicateUsernameError, UnknownRoleError
from sii_dicri.infrastructure.repositories import InMemoryUserRepository

pytestmark = pytest.mark.unit


def _new_user(usuario: str = "tecnico1") -> NewUser:
    return NewUser(
        usuario=usuario,
        password_hash="hash",
        primer_nombre="Ana",
        primer_apellido="López",
        email=f"{usuario}@dicri.test",
    )


def _create(repo: InMemoryUserRepository, usuario: str, role_ids) -> int:
    with repo.transaction() as tx:
        user_id = tx.insert_user(_new_user(usuario), None)
        tx.insert_roles(user_id, role_ids, None)
    return user_id


def test_create_user_with_roles():
    repo = InMemoryUserRepository()
    user_id = _create(repo, "tecnico1", [1])

    assert repo.get_user_by_username("TECNICO1").id == user_id
    assert [r.nombre for r in repo.list_roles_for_user(user_id)] == ["TECNICO"]
    assert repo.active_roles(user_id) == frozenset({UserRole.TECNICO})


def test_unknown_role_rolls_back_the_new_user():
    repo = InMemoryUserRepository()

    with pytest.raises(UnknownRoleError):
        _create(repo, "tecnico1", [1, 999])

    assert repo.get_user_by_username("tecnico1") is None
    assert repo.list_users(activo=None) == []


def test_failed_role_replacement_keeps_previous_roles():
    repo = InMemoryUserRepository()
    user_id = _create(repo, "tecnico1", [1])

    with pytest.raises(UnknownRoleError):
        with repo.transaction() as tx:
            tx.update_user(
                user_id,
                UserChanges(
                    primer_nombre="Otra",
                    primer_apellido="Persona",
                    email="otra@dicri.test",
                    activo=True,
                ),
                None,
                None,
            )
            tx.delete_roles(user_id)
            tx.insert_roles(user_id, [999], None)

    user = repo.get_user_by_id(user_id)
    assert user.primer_nombre == "Ana"
    assert [r.id for r in repo.list_roles_for_user(user_id)] == [1]


def test_duplicate_active_username_persists_nothing():
    repo = InMemoryUserRepository()
    _create(repo, "tecnico1", [1])

    with pytest.raises(DuplicateUsernameError):
        _create(repo, "Tecnico1", [2])

    assert len(repo.list_users(activo=None)) == 1


def test_username_can_be_reused_after_deactivation():
    repo = InMemoryUserRepository()
    old_id = _create(repo, "tecnico1", [1])
    with repo.transaction() as tx:
        tx.update_user(
            old_id,
            UserChanges(
                primer_nombre="Ana",
                primer_apellido="López",
                email="a@dicri.test",
                activo=False,
            ),
            None,
            None,
        )

    new_id = _create(repo, "tecnico1", [1])

    assert new_id != old_id
    assert repo.get_user_by_username("tecnico1").id == new_id
    assert repo.active_roles(old_id) == frozenset()


def test_list_users_filters_and_search():
    repo = InMemoryUserRepository()
    _create(repo, "tecnico1", [1])
    _create(repo, "coord1", [2])

    assert [u.usuario for u in repo.list_users(search="coord")] == ["coord1"]
    summary = repo.list_users(search="tecnico1")[0]
    assert summary.roles == ["TECNICO"]
    assert summary.role_ids == [1]
    assert repo.list_users(activo=False) == []


def test_list_roles_catalogue():
    repo = InMemoryUserRepository()
    assert [r.nombre for r in repo.list_roles()] == ["TECNICO", "COORDINADOR", "ADMIN"]
