# storefront/tasks/expire.py
from datetime import datetime, timedelta, timezone

from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.domain.enums import OrderStatus, PaymentStatus
from storefront.repos.order_repo import OrderRepo
from storefront.utils.settings import PENDING_ORDER_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def expire_pending_orders(db, ttl_seconds: int = PENDING_ORDER_TTL_SECONDS) -> int:
    """Cancel orders that never got paid. Returns how many were expired."""
    repo = OrderRepo(db)
    now = datetime.now(timezone.utc)
    cutoff = now - timedelta(seconds=ttl_seconds)

    orders = repo.stale_pending(cutoff)
    logger.info(f"Found {len(orders)} pending orders older than {cutoff.isoformat()}")

    for order in orders:
        order.status = OrderStatus.CANCELLED.value
        order.payment_status = PaymentStatus.FAILED.value
        order.status_updated_at = now
        logger.info(f"Order {order.order_number} expired ({order.payment_reference})")

    repo.commit()
    return len(orders)


@celery_app.task(name="storefront.tasks.expire.expire_pending_orders_task")
def expire_pending_orders_task():
    logger.info("Expire pending orders task started")

    db = SessionLocal()
    try:
        return expire_pending_orders(db)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
