# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.api.deps import RequestContext, get_context, get_notifier
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import OrderOut, OrderStatusUpdateIn
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/my-orders", tags=["orders"])
admin_router = APIRouter(prefix="/admin/orders", tags=["admin"])


def get_service(ctx: RequestContext, notifier: NotificationService | None = None):
    return OrderService(ctx.db, notifier=notifier)


@router.get("")
def list_orders(
    search: str | None = Query(None),
    status: str | None = Query(None),
    page: int = Query(1, ge=1),
    ctx: RequestContext = Depends(get_context),
):
    svc = get_service(ctx)
    return svc.list_orders(ctx.user.id, search=search, status=status, page=page)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, ctx: RequestContext = Depends(get_context)):
    """Order detail for the signed-in customer."""
    svc = get_service(ctx)
    try:
        return svc.get_order(ctx.user.id, order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{order_id}/track")
def track_order(order_id: int, ctx: RequestContext = Depends(get_context)):
    svc = get_service(ctx)
    try:
        return svc.track(ctx.user.id, order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{order_id}/reorder")
def reorder(order_id: int, ctx: RequestContext = Depends(get_context)):
    svc = get_service(ctx)
    try:
        return svc.reorder(ctx.user.id, order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{order_id}/invoice")
def invoice(order_id: int, ctx: RequestContext = Depends(get_context)):
    svc = get_service(ctx)
    try:
        return svc.invoice(ctx.user.id, order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@admin_router.patch("/{order_id}/status", response_model=OrderOut)
def update_status(
    order_id: int,
    payload: OrderStatusUpdateIn,
    ctx: RequestContext = Depends(get_context),
    notifier: NotificationService = Depends(get_notifier),
):
    """
    Moves an order along the status table and notifies the customer
    when the status actually changed.
    """
    svc = get_service(ctx, notifier)
    try:
        return svc.update_status(
            ctx.user,
            order_id,
            payload.status,
            location=payload.location,
            description=payload.description,
            tracking_number=payload.tracking_number,
        )
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
