from sqlalchemy import Column, DateTime, ForeignKey, Integer, LargeBinary, String, Table

from blogcms.database import metadata

tokens = Table(
    "tokens",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True),
    Column("email", String(255), nullable=False),
    # hex of token_hash, the plaintext is never stored
    Column("token", String(255), nullable=False),
    Column("token_hash", LargeBinary(32), nullable=False, unique=True),
    Column("expiry", DateTime(timezone=True), nullable=False),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
)
