"""Order validation and catalog endpoints (no external calls)."""

from fastapi import APIRouter, Depends

from greenroom.models.checkout import ValidationResult
from greenroom.services.catalog import Catalog
from greenroom.services.validation import validate
from greenroom_api.dependencies import get_catalog
from greenroom_api.models.checkout import CatalogResponse, OrderRequest

router = APIRouter(tags=["orders"])


@router.post(
    "/orders/validate",
    summary="Price and validate an order draft",
    description="""
Returns the computed amount, the price breakdown and every failed rule.
Used by the forms to show a running total and field errors before checkout.
""",
    response_model=ValidationResult,
)
async def validate_order(
    body: OrderRequest,
    catalog: Catalog = Depends(get_catalog),
) -> ValidationResult:
    return validate(body.root, catalog=catalog)


@router.get(
    "/catalog",
    summary="Published prices, menu and policies",
    response_model=CatalogResponse,
)
async def get_public_catalog(catalog: Catalog = Depends(get_catalog)) -> CatalogResponse:
    return CatalogResponse.from_catalog(catalog)
