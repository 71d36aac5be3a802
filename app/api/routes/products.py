"""
Product catalog endpoints, proxied from DashX.
"""

from fastapi import APIRouter

from app.api.deps import CurrentUserDep, DashXDep
from app.models.schemas import ProductListResponse, ProductResponse


router = APIRouter()

CATALOG_ITEMS = [
    "pen",
    "coffee-mug",
    "notebook",
    "notebook-subscription",
    "paper-subscription",
]


@router.get("", response_model=ProductListResponse)
async def list_products(current_user: CurrentUserDep, dashx: DashXDep):
    """List the catalog. Any upstream failure fails the whole request."""
    products = [await dashx.fetch_item(identifier) for identifier in CATALOG_ITEMS]
    return ProductListResponse(message="Successfully fetched.", products=products)


@router.get("/{slug}", response_model=ProductResponse)
async def get_product(slug: str, current_user: CurrentUserDep, dashx: DashXDep):
    """Get a single catalog item."""
    product = await dashx.fetch_item(slug)
    return ProductResponse(message="Successfully fetched.", product=product)
