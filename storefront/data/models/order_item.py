from sqlalchemy import Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class OrderItemModel(Base):
    """
    Snapshot of a purchased line. Product name/sku/price are copied at
    creation so historical orders do not follow later catalog edits.
    """

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True)

    product_name = Column(String(255), nullable=False)
    product_sku = Column(String(64), nullable=True)
    product_image = Column(String(500), nullable=True)

    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    size = Column(String(10), nullable=True)
    color = Column(String(20), nullable=True)

    order = relationship("OrderModel", back_populates="items")
    product = relationship("ProductModel")

    def recalculate_total(self):
        self.total_price = self.unit_price * self.quantity
