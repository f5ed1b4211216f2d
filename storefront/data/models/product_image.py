from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.utils.settings import APP_URL, STORAGE_URL


class ProductImageModel(Base):
    __tablename__ = "product_images"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    image_path = Column(String(500), nullable=False)
    alt_text = Column(String(255), nullable=True)
    is_primary = Column(Boolean, nullable=False, default=False)
    sort_order = Column(Integer, nullable=False, default=0)

    product = relationship("ProductModel", back_populates="images")

    @property
    def url(self) -> str:
        if self.image_path.startswith(("http://", "https://")):
            return self.image_path
        if self.image_path.startswith("products/"):
            return f"{STORAGE_URL}/{self.image_path}"
        return f"{APP_URL}/{self.image_path.lstrip('/')}"
