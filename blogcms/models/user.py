from sqlalchemy import Column, DateTime, Integer, String, Table

from blogcms.database import metadata

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("email", String(255), unique=True),
    Column("first_name", String(255), nullable=False),
    Column("last_name", String(255), nullable=False),
    # bcrypt hash
    Column("password", String(60), nullable=False),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
    Column("active", Integer, default=0, server_default="0"),
)
