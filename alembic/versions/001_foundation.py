"""
============================================================
TARJETA CRC (Class / Responsibilities / Collaborators)
============================================================
Class: 001_foundation (Alembic Migration)

Responsibilities:
  - Crear el esquema completo desde cero (migración fundacional).
  - Definir tablas, constraints, índices y la secuencia de numeración.
  - Sembrar roles y catálogos iniciales.

Collaborators:
  - PostgreSQL 14+
  - Alembic (framework de migraciones)
  - infrastructure/repositories/postgres (usa este esquema como contrato)

Policy:
  - Migración BASELINE. Downgrade NO soportado.
  - Convención de nombres:
      pk_<tabla>                         - Primary keys
      uq_<tabla>_<col>                   - Unique constraints
      ix_<tabla>_<col>                   - Indexes
      fk_<tabla>_<col>__<ref_tabla>      - Foreign keys
      ck_<tabla>_<regla>                 - Check constraints
============================================================
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_foundation"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ROLES = ("TECNICO", "COORDINADOR", "ADMIN")

FISCALIAS = (
    "Fiscalía de Distrito Metropolitana",
    "Fiscalía de Delitos contra la Vida",
    "Fiscalía contra el Crimen Organizado",
)

TIPOS_CASO = ("Homicidio", "Robo", "Lesiones")


def _now_column(name: str, nullable: bool = False) -> sa.Column:
    if nullable:
        return sa.Column(name, sa.DateTime(timezone=True), nullable=True)
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def _activo_column() -> sa.Column:
    return sa.Column(
        "activo", sa.Boolean, nullable=False, server_default=sa.text("true")
    )


def _catalog_table(name: str, pk: str) -> None:
    op.create_table(
        name,
        sa.Column(pk, sa.Integer, sa.Identity(), nullable=False),
        sa.Column("nombre", sa.String(200), nullable=False),
        _activo_column(),
        sa.PrimaryKeyConstraint(pk, name=f"pk_{name}"),
        sa.UniqueConstraint("nombre", name=f"uq_{name}_nombre"),
    )


def upgrade() -> None:
    """
    Orden:
      1) Identity (roles, usuarios, usuario_rol)
      2) Catálogos (fiscalias, tipos_caso)
      3) Expedientes (+ secuencia de numeración)
      4) Indicios
      5) Semillas
    """

    # =========================================================
    # 1) IDENTITY
    # =========================================================
    op.create_table(
        "roles",
        sa.Column("id_rol", sa.Integer, sa.Identity(), nullable=False),
        sa.Column("nombre", sa.String(50), nullable=False),
        _activo_column(),
        sa.PrimaryKeyConstraint("id_rol", name="pk_roles"),
        sa.UniqueConstraint("nombre", name="uq_roles_nombre"),
    )

    op.create_table(
        "usuarios",
        sa.Column("id_usuario", sa.Integer, sa.Identity(), nullable=False),
        sa.Column("usuario", sa.String(50), nullable=False),
        # Hash argon2; filas heredadas pueden traer texto plano.
        sa.Column("password_hash", sa.Text, nullable=False),
        sa.Column("primer_nombre", sa.String(100), nullable=False),
        sa.Column("segundo_nombre", sa.String(100), nullable=True),
        sa.Column("primer_apellido", sa.String(100), nullable=False),
        sa.Column("segundo_apellido", sa.String(100), nullable=True),
        sa.Column("email", sa.String(255), nullable=False),
        _activo_column(),
        sa.Column("id_usuario_registro", sa.Integer, nullable=True),
        _now_column("fecha_registro"),
        sa.Column("id_usuario_modificacion", sa.Integer, nullable=True),
        _now_column("fecha_modificacion", nullable=True),
        sa.PrimaryKeyConstraint("id_usuario", name="pk_usuarios"),
    )
    # Unicidad case-insensitive solo entre usuarios activos.
    op.execute(
        "CREATE UNIQUE INDEX uq_usuarios_usuario_activo "
        "ON usuarios (lower(usuario)) WHERE activo"
    )

    op.create_table(
        "usuario_rol",
        sa.Column("id_usuario", sa.Integer, nullable=False),
        sa.Column("id_rol", sa.Integer, nullable=False),
        sa.Column("id_usuario_asigna", sa.Integer, nullable=True),
        _now_column("fecha_asignacion"),
        sa.PrimaryKeyConstraint("id_usuario", "id_rol", name="pk_usuario_rol"),
        sa.ForeignKeyConstraint(
            ["id_usuario"],
            ["usuarios.id_usuario"],
            name="fk_usuario_rol_id_usuario__usuarios",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["id_rol"],
            ["roles.id_rol"],
            name="fk_usuario_rol_id_rol__roles",
        ),
    )
    op.create_index("ix_usuario_rol_id_rol", "usuario_rol", ["id_rol"])

    # =========================================================
    # 2) CATÁLOGOS
    # =========================================================
    _catalog_table("fiscalias", "id_fiscalia")
    _catalog_table("tipos_caso", "id_tipo_caso")

    # =========================================================
    # 3) EXPEDIENTES
    # =========================================================
    op.execute("CREATE SEQUENCE seq_numero_expediente START 1")

    op.create_table(
        "expedientes",
        sa.Column("id_expediente", sa.Integer, sa.Identity(), nullable=False),
        sa.Column("numero_expediente", sa.String(30), nullable=False),
        sa.Column("descripcion", sa.Text, nullable=False),
        sa.Column("id_fiscalia", sa.Integer, nullable=False),
        # Snapshot del nombre al momento de escribir.
        sa.Column("fiscalia_nombre", sa.String(200), nullable=False),
        sa.Column("id_tipo_caso", sa.Integer, nullable=False),
        sa.Column("tipo_caso_nombre", sa.String(200), nullable=False),
        sa.Column("fecha_hecho", sa.Date, nullable=False),
        sa.Column(
            "estado",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'BORRADOR'"),
        ),
        sa.Column("justificacion_rechazo", sa.Text, nullable=True),
        sa.Column("id_usuario_registro", sa.Integer, nullable=False),
        _now_column("fecha_registro"),
        sa.Column("id_usuario_modificacion", sa.Integer, nullable=True),
        _now_column("fecha_modificacion", nullable=True),
        _activo_column(),
        sa.PrimaryKeyConstraint("id_expediente", name="pk_expedientes"),
        sa.UniqueConstraint(
            "numero_expediente", name="uq_expedientes_numero_expediente"
        ),
        sa.CheckConstraint(
            "estado IN ('BORRADOR', 'REVISION', 'APROBADO', 'RECHAZADO')",
            name="ck_expedientes_estado",
        ),
        sa.CheckConstraint(
            "justificacion_rechazo IS NULL OR estado = 'RECHAZADO'",
            name="ck_expedientes_justificacion_solo_rechazado",
        ),
        sa.ForeignKeyConstraint(
            ["id_fiscalia"],
            ["fiscalias.id_fiscalia"],
            name="fk_expedientes_id_fiscalia__fiscalias",
        ),
        sa.ForeignKeyConstraint(
            ["id_tipo_caso"],
            ["tipos_caso.id_tipo_caso"],
            name="fk_expedientes_id_tipo_caso__tipos_caso",
        ),
        sa.ForeignKeyConstraint(
            ["id_usuario_registro"],
            ["usuarios.id_usuario"],
            name="fk_expedientes_id_usuario_registro__usuarios",
        ),
    )
    # Listado: activos filtrados por estado / fecha del hecho.
    op.execute(
        "CREATE INDEX ix_expedientes_estado_activo "
        "ON expedientes (estado) WHERE activo"
    )
    op.create_index("ix_expedientes_fecha_hecho", "expedientes", ["fecha_hecho"])
    op.create_index(
        "ix_expedientes_fecha_registro", "expedientes", ["fecha_registro"]
    )

    # =========================================================
    # 4) INDICIOS
    # =========================================================
    op.create_table(
        "indicios",
        sa.Column("id_indicio", sa.Integer, sa.Identity(), nullable=False),
        sa.Column("id_expediente", sa.Integer, nullable=False),
        sa.Column("nombre", sa.String(200), nullable=False),
        sa.Column("descripcion", sa.Text, nullable=True),
        sa.Column("color", sa.String(100), nullable=True),
        sa.Column("tamano", sa.String(100), nullable=True),
        sa.Column("peso", sa.Numeric(10, 2), nullable=True),
        sa.Column("ubicacion", sa.String(255), nullable=True),
        sa.Column("id_usuario_registro", sa.Integer, nullable=False),
        _now_column("fecha_registro"),
        sa.Column("id_usuario_modificacion", sa.Integer, nullable=True),
        _now_column("fecha_modificacion", nullable=True),
        _activo_column(),
        sa.PrimaryKeyConstraint("id_indicio", name="pk_indicios"),
        sa.CheckConstraint(
            "peso IS NULL OR peso >= 0", name="ck_indicios_peso_no_negativo"
        ),
        sa.ForeignKeyConstraint(
            ["id_expediente"],
            ["expedientes.id_expediente"],
            name="fk_indicios_id_expediente__expedientes",
        ),
        sa.ForeignKeyConstraint(
            ["id_usuario_registro"],
            ["usuarios.id_usuario"],
            name="fk_indicios_id_usuario_registro__usuarios",
        ),
    )
    op.create_index("ix_indicios_id_expediente", "indicios", ["id_expediente"])

    # =========================================================
    # 5) SEMILLAS
    # =========================================================
    roles = sa.table("roles", sa.column("nombre", sa.String))
    op.bulk_insert(roles, [{"nombre": nombre} for nombre in ROLES])

    fiscalias = sa.table("fiscalias", sa.column("nombre", sa.String))
    op.bulk_insert(fiscalias, [{"nombre": nombre} for nombre in FISCALIAS])

    tipos_caso = sa.table("tipos_caso", sa.column("nombre", sa.String))
    op.bulk_insert(tipos_caso, [{"nombre": nombre} for nombre in TIPOS_CASO])


def downgrade() -> None:
    """Downgrade NO soportado para la migración fundacional."""
    raise NotImplementedError(
        "Baseline: downgrade no soportado por política. "
        "Para resetear la base de datos, recrearla y ejecutar `alembic upgrade head`."
    )
