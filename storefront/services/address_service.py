# storefront/services/address_service.py
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel
from storefront.domain.errors import NotFoundError
from storefront.repos.address_repo import AddressRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class AddressService:
    """
    Saved addresses. Per (user, type) at most one default:
    the first address of a type becomes the default, and marking
    one as default clears the flag on the others.
    """

    def __init__(self, db: Session):
        self.repo = AddressRepo(db)

    def list_addresses(self, user_id: int) -> List[AddressModel]:
        return self.repo.list_for_user(user_id)

    def _get_owned(self, user_id: int, address_id: int) -> AddressModel:
        address = self.repo.get_address(address_id)
        if not address:
            raise NotFoundError("Address not found")
        if address.user_id != user_id:
            raise PermissionError("Address belongs to another user")
        return address

    def create(self, user_id: int, data: Dict[str, Any]) -> AddressModel:
        data = dict(data)
        if not self.repo.has_type(user_id, data["type"]):
            data["is_default"] = True

        address = self.repo.add(AddressModel(user_id=user_id, **data))

        if address.is_default:
            self.repo.unset_defaults(user_id, address.type, except_id=address.id)

        self.repo.commit()
        logger.info(f"Address {address.id} ({address.type}) added for user {user_id}")
        return address

    def update(self, user_id: int, address_id: int, data: Dict[str, Any]) -> AddressModel:
        address = self._get_owned(user_id, address_id)

        for field, value in data.items():
            setattr(address, field, value)

        if address.is_default:
            self.repo.unset_defaults(user_id, address.type, except_id=address.id)

        self.repo.commit()
        logger.info(f"Address {address.id} updated for user {user_id}")
        return address

    def delete(self, user_id: int, address_id: int) -> Dict[str, Any]:
        address = self._get_owned(user_id, address_id)
        self.repo.delete(address)
        self.repo.commit()
        logger.info(f"Address {address_id} deleted for user {user_id}")
        return {"message": "Address deleted successfully."}
