from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.utils.settings import PLACEHOLDER_IMAGE_URL


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    short_description = Column(String(500), nullable=True)
    sku = Column(String(64), nullable=False, unique=True)

    price = Column(Numeric(10, 2), nullable=False)
    compare_price = Column(Numeric(10, 2), nullable=True)
    cost_price = Column(Numeric(10, 2), nullable=True)

    stock_quantity = Column(Integer, nullable=False, default=0)
    track_stock = Column(Boolean, nullable=False, default=True)

    is_active = Column(Boolean, nullable=False, default=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    is_new = Column(Boolean, nullable=False, default=False)
    is_bestseller = Column(Boolean, nullable=False, default=False)

    brand = Column(String(120), nullable=True)
    material = Column(String(120), nullable=True)
    sizes = Column(JSON, nullable=True)
    colors = Column(JSON, nullable=True)
    features = Column(JSON, nullable=True)
    tags = Column(JSON, nullable=True)

    rating = Column(Numeric(2, 1), nullable=False, default=0)
    review_count = Column(Integer, nullable=False, default=0)
    sales_count = Column(Integer, nullable=False, default=0)
    view_count = Column(Integer, nullable=False, default=0)

    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    category = relationship("CategoryModel", back_populates="products")
    images = relationship(
        "ProductImageModel",
        back_populates="product",
        order_by="ProductImageModel.sort_order",
        cascade="all, delete-orphan",
    )

    @property
    def in_stock(self) -> bool:
        if not self.track_stock:
            return True
        return self.stock_quantity > 0

    @property
    def is_on_sale(self) -> bool:
        return bool(self.compare_price) and self.compare_price > self.price

    @property
    def discount_percentage(self) -> float | None:
        if not self.is_on_sale:
            return None
        pct = (self.compare_price - self.price) / self.compare_price * 100
        return float(Decimal(pct).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))

    @property
    def primary_image_url(self) -> str:
        primary = next((i for i in self.images if i.is_primary), None)
        if primary is None and self.images:
            primary = self.images[0]
        if primary is None:
            return PLACEHOLDER_IMAGE_URL
        return primary.url
