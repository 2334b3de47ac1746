"""
Products router — read-only view of the deposit product catalog and
interest projections.

Public endpoints (no token needed, the catalog is not personal data):
  GET /products                          — List products
  GET /products/{product_id}             — Get one product
  GET /products/{product_id}/interest    — Project interest for a product
  GET /interest/projection               — Project interest for any rate/term
"""

from decimal import Decimal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from bank_ledger.database import get_db
from bank_ledger.schemas.product import InterestProjectionResponse, ProductResponse
from bank_ledger.services import product_service
from bank_ledger.services.interest import project_interest

router = APIRouter()

# Term used when a product has no fixed duration
DEFAULT_PROJECTION_MONTHS = 12


@router.get(
    "/products",
    response_model=list[ProductResponse],
    summary="List deposit products",
)
async def list_products(
    active_only: bool = Query(False, description="Only products open for new accounts"),
    db: AsyncSession = Depends(get_db),
):
    return await product_service.list_products(db, active_only=active_only)


@router.get(
    "/products/{product_id}",
    response_model=ProductResponse,
    summary="Get a deposit product",
)
async def get_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await product_service.get_product(db, product_id)


@router.get(
    "/products/{product_id}/interest",
    response_model=InterestProjectionResponse,
    summary="Project interest for a product",
)
async def project_product_interest(
    product_id: int,
    principal: int = Query(..., ge=0, description="Principal in minor currency units"),
    months: int | None = Query(None, ge=0, description="Defaults to the product's term, else 12"),
    db: AsyncSession = Depends(get_db),
):
    """
    Project interest at the product's rate. The term defaults to the
    product's duration_months, or 12 months for products without one.
    """
    product = await product_service.get_product(db, product_id)
    if months is None:
        months = product.duration_months or DEFAULT_PROJECTION_MONTHS
    return project_interest(principal, product.interest_rate, months)


@router.get(
    "/interest/projection",
    response_model=InterestProjectionResponse,
    summary="Project interest for a rate and term",
)
async def project_interest_for_terms(
    principal: int = Query(..., description="Principal in minor currency units"),
    rate: Decimal = Query(..., description="Annual rate in percent, e.g. 2.5"),
    months: int = Query(..., description="Term in months"),
):
    """
    Gross interest, 15.4% withholding tax, net interest and total payout,
    each rounded half-to-even to a whole minor unit.
    """
    return project_interest(principal, rate, months)
