from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel


class AddressRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_address(self, address_id: int) -> AddressModel | None:
        return self.db.get(AddressModel, address_id)

    def list_for_user(self, user_id: int) -> list[AddressModel]:
        return list(
            self.db.execute(
                select(AddressModel)
                .where(AddressModel.user_id == user_id)
                .order_by(AddressModel.type, AddressModel.is_default.desc(), AddressModel.id)
            ).scalars().all()
        )

    def has_type(self, user_id: int, address_type: str) -> bool:
        return self.db.execute(
            select(AddressModel.id).where(
                AddressModel.user_id == user_id,
                AddressModel.type == address_type,
            )
        ).first() is not None

    def unset_defaults(self, user_id: int, address_type: str, except_id: int | None = None):
        stmt = update(AddressModel).where(
            AddressModel.user_id == user_id,
            AddressModel.type == address_type,
        )
        if except_id is not None:
            stmt = stmt.where(AddressModel.id != except_id)
        self.db.execute(stmt.values(is_default=False))

    def add(self, address: AddressModel) -> AddressModel:
        self.db.add(address)
        self.db.flush()
        return address

    def delete(self, address: AddressModel):
        self.db.delete(address)

    def commit(self):
        self.db.commit()
