# storefront/api/routers/payment.py
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session

from storefront.api.deps import (
    RequestContext,
    get_context,
    get_gateway,
    get_lock_service,
    get_notifier,
    get_optional_user,
)
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import ConcurrencyConflictError, NotFoundError, PaymentGatewayError
from storefront.domain.schemas import PaymentInitializeIn, PaymentVerifyIn
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.payment_gateway import PaystackClient
from storefront.services.payment_service import PaymentService
from storefront.utils.settings import FRONTEND_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/payment", tags=["payment"])


def get_service(
    db: Session = Depends(get_db),
    gateway: PaystackClient = Depends(get_gateway),
    lock_service: LockService = Depends(get_lock_service),
    notifier: NotificationService = Depends(get_notifier),
) -> PaymentService:
    return PaymentService(db, gateway, lock_service, notifier)


def _fail(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": False, "message": message})


def _to_checkout(error: str) -> RedirectResponse:
    return RedirectResponse(f"{FRONTEND_URL}/checkout?{urlencode({'error': error})}", status_code=302)


def _to_success(order_number: str) -> RedirectResponse:
    return RedirectResponse(
        f"{FRONTEND_URL}/checkout/success?{urlencode({'order': order_number})}",
        status_code=302,
    )


@router.post("/initialize")
def initialize(
    payload: PaymentInitializeIn,
    ctx: RequestContext = Depends(get_context),
    svc: PaymentService = Depends(get_service),
):
    try:
        data = svc.initialize(ctx.user, payload.order_data.model_dump(), payload.amount)
    except PaymentGatewayError as e:
        return _fail(400, str(e))
    except ValueError as e:
        return _fail(400, str(e))
    except Exception as e:
        logger.error(f"Payment initialization error for user {ctx.user.id}: {e}")
        return _fail(500, "Payment initialization failed. Please try again.")

    return {"status": True, "data": data, "message": "Payment initialized successfully"}


@router.get("/callback")
def callback(
    reference: str | None = Query(None),
    user: UserModel | None = Depends(get_optional_user),
    svc: PaymentService = Depends(get_service),
):
    try:
        result = svc.callback(reference, user)
    except ConcurrencyConflictError as e:
        return _to_checkout(str(e))
    except Exception as e:
        logger.error(f"Payment callback error for reference {reference}: {e}")
        return _to_checkout("Payment processing failed. Please contact support.")

    if result["error"]:
        return _to_checkout(result["error"])
    return _to_success(result["order"].order_number)


@router.post("/verify")
def verify(
    payload: PaymentVerifyIn,
    ctx: RequestContext = Depends(get_context),
    svc: PaymentService = Depends(get_service),
):
    try:
        data = svc.verify(payload.reference, ctx.user)
    except NotFoundError as e:
        return _fail(404, str(e))
    except ConcurrencyConflictError as e:
        return _fail(409, str(e))
    except PaymentGatewayError as e:
        return _fail(400, str(e))
    except Exception as e:
        logger.error(f"Payment verification error for reference {payload.reference}: {e}")
        return _fail(500, "Payment verification error. Please contact support.")

    return {"status": True, **data}
