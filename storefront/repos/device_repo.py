from sqlalchemy import and_, delete, select, update
from sqlalchemy.orm import Session

from storefront.data.models.user_device import UserDeviceModel


class DeviceRepo:
    def __init__(self, db: Session):
        self.db = db

    def find(self, user_id: int, ip_address: str | None, user_agent: str | None) -> UserDeviceModel | None:
        return self.db.execute(
            select(UserDeviceModel).where(
                UserDeviceModel.user_id == user_id,
                UserDeviceModel.ip_address == ip_address,
                UserDeviceModel.user_agent == user_agent,
            )
        ).scalars().first()

    def get_device(self, device_id: int) -> UserDeviceModel | None:
        return self.db.get(UserDeviceModel, device_id)

    def list_for_user(self, user_id: int) -> list[UserDeviceModel]:
        return list(
            self.db.execute(
                select(UserDeviceModel)
                .where(UserDeviceModel.user_id == user_id)
                .order_by(UserDeviceModel.last_used_at.desc())
            ).scalars().all()
        )

    def mark_others_not_current(self, user_id: int, keep_id: int):
        self.db.execute(
            update(UserDeviceModel)
            .where(and_(UserDeviceModel.user_id == user_id, UserDeviceModel.id != keep_id))
            .values(is_current=False)
        )

    def delete_not_current(self, user_id: int) -> int:
        result = self.db.execute(
            delete(UserDeviceModel).where(
                UserDeviceModel.user_id == user_id,
                UserDeviceModel.is_current.is_(False),
            )
        )
        return result.rowcount

    def add(self, device: UserDeviceModel) -> UserDeviceModel:
        self.db.add(device)
        self.db.flush()
        return device

    def delete(self, device: UserDeviceModel):
        self.db.delete(device)

    def commit(self):
        self.db.commit()
