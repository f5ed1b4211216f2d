# storefront/api/routers/wishlist.py
from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.api.deps import RequestContext, get_context
from storefront.domain.errors import AlreadyExistsError, NotFoundError
from storefront.domain.schemas import WishlistIn
from storefront.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


@router.get("")
def list_wishlist(
    search: str | None = Query(None),
    category: str | None = Query(None),
    brand: str | None = Query(None),
    sort: str = Query("newest"),
    ctx: RequestContext = Depends(get_context),
):
    return WishlistService(ctx.db).list_items(
        ctx.user.id, search=search, category=category, brand=brand, sort=sort
    )


@router.post("")
def add_to_wishlist(payload: WishlistIn, ctx: RequestContext = Depends(get_context)):
    try:
        return WishlistService(ctx.db).add(ctx.user.id, payload.product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AlreadyExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))


#must stay above DELETE /{product_id}
@router.delete("/clear")
def clear_wishlist(ctx: RequestContext = Depends(get_context)):
    return WishlistService(ctx.db).clear(ctx.user.id)


@router.post("/toggle")
def toggle_wishlist(payload: WishlistIn, ctx: RequestContext = Depends(get_context)):
    try:
        return WishlistService(ctx.db).toggle(ctx.user.id, payload.product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/check/{product_id}")
def check_wishlist(product_id: int, ctx: RequestContext = Depends(get_context)):
    return WishlistService(ctx.db).check(ctx.user.id, product_id)


@router.delete("/{product_id}")
def remove_from_wishlist(product_id: int, ctx: RequestContext = Depends(get_context)):
    try:
        return WishlistService(ctx.db).remove(ctx.user.id, product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
