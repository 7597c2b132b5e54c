"""
============================================================
TARJETA CRC (Class / Responsibilities / Collaborators)
============================================================
Class: 001_foundation (Alembic Migration)

Responsibilities:
  - Crear el esquema completo desde cero (users + posts).
  - Definir constraints e índices que sostienen los listados
    (orden created_at DESC, filtro por autor, full-text search).

Collaborators:
  - PostgreSQL 14+ (columnas generadas STORED)
  - Repositorios Postgres (usan este esquema como contrato)

Policy:
  - Migración BASELINE; evolución futura con migraciones aditivas (002+).
  - Convención de nombres:
      pk_<tabla>                         - Primary keys
      uq_<tabla>_<col>                   - Unique constraints / indexes
      ix_<tabla>_<col>                   - Indexes
      fk_<tabla>_<col>__<ref_tabla>      - Foreign keys
      ck_<tabla>_<col>                   - Check constraints
============================================================
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_foundation"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# ============================================================
# Constants
# ============================================================
_FTS_CONFIG = "simple"
_GIN_INDEX = "ix_posts_tsv"


def upgrade() -> None:
    # =========================================================
    # 1) IDENTITY (users)
    # =========================================================
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(254), nullable=False),
        sa.Column("password_hash", sa.Text, nullable=False),
        sa.Column(
            "role",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'user'"),
        ),
        sa.Column(
            "is_active",
            sa.Boolean,
            nullable=False,
            server_default=sa.text("true"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
    )
    # R: unicidad case-insensitive (el dominio ya normaliza a minúsculas).
    op.execute("CREATE UNIQUE INDEX uq_users_email_lower ON users (lower(email))")
    op.create_index(
        "ix_users_created_at",
        "users",
        [sa.text("created_at DESC"), sa.text("id DESC")],
    )

    # =========================================================
    # 2) POSTS
    # =========================================================
    op.create_table(
        "posts",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("image", sa.Text, nullable=True),
        sa.Column("author_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "is_active",
            sa.Boolean,
            nullable=False,
            server_default=sa.text("true"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_posts"),
        sa.ForeignKeyConstraint(
            ["author_id"],
            ["users.id"],
            name="fk_posts_author_id__users",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_posts_created_at",
        "posts",
        [sa.text("created_at DESC"), sa.text("id DESC")],
    )
    op.create_index(
        "ix_posts_author_id_created_at",
        "posts",
        ["author_id", sa.text("created_at DESC")],
    )

    # tsvector generado + GIN para búsqueda por título/descripción
    op.execute(
        f"ALTER TABLE posts ADD COLUMN tsv tsvector "
        f"GENERATED ALWAYS AS (to_tsvector('{_FTS_CONFIG}', "
        f"coalesce(title, '') || ' ' || coalesce(description, ''))) STORED"
    )
    op.execute(f"CREATE INDEX {_GIN_INDEX} ON posts USING gin (tsv)")


def downgrade() -> None:
    op.execute(f"DROP INDEX IF EXISTS {_GIN_INDEX}")
    op.drop_table("posts")
    op.drop_table("users")
