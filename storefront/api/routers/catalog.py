# storefront/api/routers/catalog.py
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import NotFoundError
from storefront.services.catalog_service import CatalogService

router = APIRouter(tags=["catalog"])


@router.get("/")
def home(db: Session = Depends(get_db)):
    return CatalogService(db).home()


@router.get("/product-list")
def product_list(
    category: str | None = Query(None),
    filter: str | None = Query(None),
    search: str | None = Query(None),
    min_price: Decimal | None = Query(None, ge=0),
    max_price: Decimal | None = Query(None, ge=0),
    sort: str = Query("newest"),
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
):
    return CatalogService(db).list_products(
        category=category,
        flag=filter,
        search=search,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
        page=page,
    )


@router.get("/products/{id_or_slug}")
def product_detail(id_or_slug: str, db: Session = Depends(get_db)):
    try:
        return CatalogService(db).get_product(id_or_slug)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/categories")
def categories(db: Session = Depends(get_db)):
    return CatalogService(db).get_categories()
