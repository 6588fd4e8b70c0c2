"""SQLAlchemy table definitions for the identity service.

They match the schema defined in Alembic migrations. Constraint names are
part of the contract: repositories map integrity errors by name.
"""

from sqlalchemy import (
    BigInteger,
    Column,
    ForeignKey,
    Identity,
    Index,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

USERS_EMAIL_CONSTRAINT = "uq_users_email"
ACCOUNTS_PROVIDER_IDENTITY_INDEX = "uq_accounts_provider_identity"
ACCOUNTS_USER_FK = "fk_accounts_user_id"

# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column("name", String(120), nullable=False),
    Column("email", String(320), nullable=False),  # Stored lowercased
    Column("password_hash", Text, nullable=True),  # Local credentials only
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("email", name=USERS_EMAIL_CONSTRAINT),
)

# ============================================================================
# ACCOUNTS TABLE (linked provider identities)
# ============================================================================
accounts_table = Table(
    "accounts",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column(
        "user_id",
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE", name=ACCOUNTS_USER_FK),
        nullable=False,
    ),
    Column("provider", String(50), nullable=False),  # 'google', 'github'
    Column("provider_user_id", String(255), nullable=False),
    Column("email", String(320), nullable=True),  # Snapshot at link time
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    # Insertion order; rows written in one transaction share created_at
    Column("link_order", BigInteger, Identity(), nullable=False),
)

# Provider user ids compare case-insensitively
Index(
    ACCOUNTS_PROVIDER_IDENTITY_INDEX,
    accounts_table.c.provider,
    func.lower(accounts_table.c.provider_user_id),
    unique=True,
)
Index("idx_accounts_user_id", accounts_table.c.user_id)

# ============================================================================
# OAUTH STATES TABLE (single-use authorization attempts)
# ============================================================================
oauth_states_table = Table(
    "oauth_states",
    metadata,
    Column("state", String(128), primary_key=True),
    Column("provider", String(50), nullable=False),
    Column("code_verifier", String(128), nullable=False),
    Column("nonce", String(128), nullable=True),
    Column("redirect_uri", Text, nullable=False),
    Column("created_at", TIMESTAMP(timezone=True), nullable=False),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
)

Index("idx_oauth_states_expires_at", oauth_states_table.c.expires_at)
