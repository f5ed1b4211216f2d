from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class CategoryModel(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    image = Column(String(255), nullable=True)
    parent_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    gender = Column(String(20), nullable=True)

    parent = relationship("CategoryModel", remote_side=[id], back_populates="children")
    children = relationship(
        "CategoryModel",
        back_populates="parent",
        order_by="CategoryModel.sort_order",
    )
    products = relationship("ProductModel", back_populates="category")

    def lineage(self) -> list["CategoryModel"]:
        """Root-first chain of categories ending with this one."""
        chain = []
        category = self
        while category is not None:
            chain.insert(0, category)
            category = category.parent
        return chain

    @property
    def full_name(self) -> str:
        return " > ".join(c.name for c in self.lineage())

    def breadcrumbs(self) -> list[dict]:
        return [
            {
                "name": c.name,
                "slug": c.slug,
                "url": f"/product-list?category={c.slug}",
            }
            for c in self.lineage()
        ]
