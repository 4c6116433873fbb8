from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, Text

from blogcms.database import metadata

blogs = Table(
    "blogs",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("title", String(512)),
    Column("slug", String(512), index=True),
    Column("createdby_id", Integer, ForeignKey("users.id"), nullable=False),
    Column("description", Text),
    Column("content", Text),
    Column("created_at", DateTime),
    Column("updated_at", DateTime),
)
