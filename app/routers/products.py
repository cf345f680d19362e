import uuid

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from app.core.config import get_settings
from app.database import get_session
from app.repositories.product_repo import ProductRepository
from app.schemas.product import (
    CategoryFilter,
    ProductPage,
    ProductRead,
    ProductSort,
)
from app.services.product_service import ProductService

settings = get_settings()

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo, page_size=settings.CATALOG_PAGE_SIZE)


@router.get("", response_model=ProductPage)
def list_products(
    session: Session = Depends(get_session),
    category: CategoryFilter = "all",
    sort: ProductSort = "latest",
    page: int = Query(default=1, ge=1),
    page_size: int | None = Query(default=None, ge=1, le=100),
):
    """
    List active products, one page at a time.

    - Public endpoint.
    - `sort`: latest | price_asc | price_desc
    """
    return service.list_products(
        session, category=category, sort=sort, page=page, page_size=page_size
    )


@router.get("/latest", response_model=list[ProductRead])
def list_latest_products(
    session: Session = Depends(get_session),
    category: CategoryFilter = "all",
    limit: int = Query(default=8, ge=1, le=50),
):
    """
    Newest active products (home page sections).
    """
    return service.list_latest(session, category=category, limit=limit)


@router.get("/categories", response_model=list[str])
def list_categories():
    """Known product categories."""
    return service.list_categories()


@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get a single product by id.

    - Public endpoint.
    """
    return service.get_product(session, product_id)
