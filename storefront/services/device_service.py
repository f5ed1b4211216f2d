# storefront/services/device_service.py
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy.orm import Session
from user_agents import parse

from storefront.data.models.user_device import UserDeviceModel
from storefront.domain.errors import NotFoundError
from storefront.repos.device_repo import DeviceRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_UNKNOWN = "Other"


def _label(family: str, version: str) -> str | None:
    if not family or family == _UNKNOWN:
        return None
    return f"{family} {version}".strip()


def parse_user_agent(user_agent: str | None) -> Dict[str, str | None]:
    ua = parse(user_agent or "")

    if ua.is_tablet:
        device_type = "Tablet"
    elif ua.is_mobile:
        device_type = "Phone"
    else:
        device_type = "Computer"

    browser = _label(ua.browser.family, ua.browser.version_string)
    platform = _label(ua.os.family, ua.os.version_string)
    browser_name = ua.browser.family if browser else "Unknown"
    platform_name = ua.os.family if platform else "Unknown"
    return {
        "device_name": f"{device_type} ({browser_name} on {platform_name})",
        "browser": browser,
        "platform": platform,
    }


class DeviceService:
    def __init__(self, db: Session):
        self.repo = DeviceRepo(db)

    def track(self, user_id: int, ip_address: str | None, user_agent: str | None) -> UserDeviceModel:
        """Upsert the calling device by (user, ip, user agent) and make it the current one."""
        now = datetime.now(timezone.utc)
        device = self.repo.find(user_id, ip_address, user_agent)

        if device:
            device.last_used_at = now
            device.is_current = True
        else:
            parsed = parse_user_agent(user_agent)
            device = self.repo.add(
                UserDeviceModel(
                    user_id=user_id,
                    ip_address=ip_address,
                    user_agent=user_agent,
                    is_current=True,
                    last_used_at=now,
                    **parsed,
                )
            )
            logger.info(f"New device {device.device_name} for user {user_id}")

        self.repo.mark_others_not_current(user_id, device.id)
        self.repo.commit()
        return device

    def list_devices(self, user_id: int) -> List[UserDeviceModel]:
        return self.repo.list_for_user(user_id)

    def remove(self, user_id: int, device_id: int) -> Dict[str, Any]:
        device = self.repo.get_device(device_id)
        if not device:
            raise NotFoundError("Device not found")
        if device.user_id != user_id:
            raise PermissionError("Device belongs to another user")
        if device.is_current:
            raise ValueError("You cannot remove your current device.")

        self.repo.delete(device)
        self.repo.commit()
        logger.info(f"Device {device_id} removed by user {user_id}")
        return {"message": "Device removed successfully."}

    def remove_others(self, user_id: int) -> Dict[str, Any]:
        removed = self.repo.delete_not_current(user_id)
        self.repo.commit()
        logger.info(f"User {user_id} removed {removed} other device(s)")
        return {"message": "All other devices have been removed.", "removed": removed}
