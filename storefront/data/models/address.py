from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class AddressModel(Base):
    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(20), nullable=False)  # billing, shipping

    full_name = Column(String(255), nullable=False)
    company = Column(String(255), nullable=True)
    address_line_1 = Column(String(255), nullable=False)
    address_line_2 = Column(String(255), nullable=True)
    city = Column(String(255), nullable=False)
    state = Column(String(255), nullable=False)
    postal_code = Column(String(20), nullable=False)
    country = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)
    is_default = Column(Boolean, nullable=False, default=False)

    user = relationship("UserModel", back_populates="addresses")

    @property
    def formatted_address(self) -> str:
        parts = [
            self.address_line_1,
            self.address_line_2,
            self.city,
            f"{self.state} {self.postal_code}".strip(),
            self.country,
        ]
        return ", ".join(p for p in parts if p)

    def to_order_format(self) -> dict:
        return {
            "full_name": self.full_name,
            "company": self.company,
            "address_line_1": self.address_line_1,
            "address_line_2": self.address_line_2,
            "city": self.city,
            "state": self.state,
            "postal_code": self.postal_code,
            "country": self.country,
            "phone": self.phone,
        }
