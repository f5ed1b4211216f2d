# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import RequestContext, get_context, get_lock_service
from storefront.domain.errors import ConcurrencyConflictError, NotFoundError
from storefront.domain.schemas import CartAddIn, CartMutationOut, CartOut, CartUpdateIn
from storefront.services.cart_service import CartService
from storefront.services.lock_service import LockService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(ctx: RequestContext, lock_service: LockService):
    return CartService(db=ctx.db, lock_service=lock_service)


@router.get("", response_model=CartOut)
def get_cart(
    ctx: RequestContext = Depends(get_context),
    lock_service: LockService = Depends(get_lock_service),
):
    svc = get_service(ctx, lock_service)
    return svc.get_cart(ctx.user.id)


@router.get("/count")
def get_cart_count(
    ctx: RequestContext = Depends(get_context),
    lock_service: LockService = Depends(get_lock_service),
):
    svc = get_service(ctx, lock_service)
    return {"count": svc.get_cart_count(ctx.user.id)}


@router.post("/add", response_model=CartMutationOut)
def add_item(
    payload: CartAddIn,
    ctx: RequestContext = Depends(get_context),
    lock_service: LockService = Depends(get_lock_service),
):
    svc = get_service(ctx, lock_service)
    try:
        return svc.add_item(
            user_id=ctx.user.id,
            product_id=payload.product_id,
            quantity=payload.quantity,
            size=payload.size,
            color=payload.color,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConcurrencyConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/update/{item_id}", response_model=CartMutationOut)
def update_item(
    item_id: int,
    payload: CartUpdateIn,
    ctx: RequestContext = Depends(get_context),
    lock_service: LockService = Depends(get_lock_service),
):
    svc = get_service(ctx, lock_service)
    try:
        return svc.update_item(ctx.user.id, item_id, payload.quantity)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/remove/{item_id}", response_model=CartMutationOut)
def remove_item(
    item_id: int,
    ctx: RequestContext = Depends(get_context),
    lock_service: LockService = Depends(get_lock_service),
):
    svc = get_service(ctx, lock_service)
    return svc.remove_item(ctx.user.id, item_id)


@router.delete("/clear", response_model=CartMutationOut)
def clear_cart(
    ctx: RequestContext = Depends(get_context),
    lock_service: LockService = Depends(get_lock_service),
):
    svc = get_service(ctx, lock_service)
    return svc.clear(ctx.user.id)
