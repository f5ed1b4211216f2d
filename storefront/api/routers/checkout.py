# storefront/api/routers/checkout.py
from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.api.deps import RequestContext, get_context, get_lock_service
from storefront.domain.errors import NotFoundError
from storefront.services.checkout_service import CheckoutService
from storefront.services.lock_service import LockService

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.get("")
def checkout(
    ctx: RequestContext = Depends(get_context),
    lock_service: LockService = Depends(get_lock_service),
):
    svc = CheckoutService(ctx.db, lock_service)
    try:
        return svc.checkout_page(ctx.user.id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/success")
def checkout_success(
    order: str | None = Query(None),
    ctx: RequestContext = Depends(get_context),
    lock_service: LockService = Depends(get_lock_service),
):
    svc = CheckoutService(ctx.db, lock_service)
    try:
        return svc.success_page(ctx.user.id, order)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
