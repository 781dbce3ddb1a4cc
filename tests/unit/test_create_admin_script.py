"""
Name: Admin Bootstrap Script Tests

Responsibilities:
  - create_admin() assigns the ADMIN role and is idempotent by username
  - Weak passwords abort with the policy message
  - CLI argument parsing tolerates a leading "--"
"""

import importlib.util
from pathlib import Path

import pytest
from sii_dicri.identity.auth_users import verify_password

pytestmark = pytest.mark.unit

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "create_admin.py"


@pytest.fixture
def script():
    spec = importlib.util.spec_from_file_location("create_admin_script", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _create(script, **overrides):
    values = dict(
        usuario="admin",
        email="admin@dicri.test",
        password="Admin2024",
        primer_nombre="Administrador",
        primer_apellido="Sistema",
    )
    values.update(overrides)
    return script.create_admin(**values)


def test_creates_admin_with_hashed_password(script, users_repo):
    user_id = _create(script)

    user = users_repo.get_user_by_id(user_id)
    assert verify_password("Admin2024", user.password_hash, allow_legacy=False)
    assert [r.nombre for r in users_repo.list_roles_for_user(user_id)] == ["ADMIN"]


def test_is_idempotent(script, users_repo):
    first = _create(script)
    second = _create(script, usuario="ADMIN", password="OtraClave1")

    assert first == second
    assert len(users_repo.list_users(activo=None)) == 1


def test_weak_password_aborts(script, users_repo):
    with pytest.raises(SystemExit, match="al menos una letra y un número"):
        _create(script, password="soloLetras")

    assert users_repo.get_user_by_username("admin") is None


def test_parse_args_skips_separator(script):
    args = script._parse_args(["--", "--usuario", "root", "--email", "r@d.t"])

    assert args.usuario == "root"
    assert args.email == "r@d.t"
    assert args.primer_nombre == "Administrador"
