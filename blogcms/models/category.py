from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, UniqueConstraint

from blogcms.database import metadata

categorys = Table(
    "categorys",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("category_name", String(255)),
    Column("created_at", DateTime),
    Column("updated_at", DateTime),
)

# many-to-many join table, the only place the blog <-> category relation lives
blogs_categorys = Table(
    "blogs_categorys",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("blog_id", Integer, ForeignKey("blogs.id", ondelete="CASCADE"), index=True),
    Column("category_id", Integer, ForeignKey("categorys.id", ondelete="CASCADE")),
    Column("created_at", DateTime),
    Column("updated_at", DateTime),
    UniqueConstraint("blog_id", "category_id", name="uq_blogs_categorys_blog_category"),
)
