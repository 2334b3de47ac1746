"""
Pydantic schemas for Product and interest projection endpoints.

Interest rates are serialized as decimal strings ("2.5"), never floats.
"""

from decimal import Decimal

from pydantic import BaseModel

from bank_ledger.models.product import ProductType


class ProductResponse(BaseModel):
    """Public representation of a deposit product."""
    id: int
    name: str
    product_type: ProductType
    interest_rate: Decimal
    min_amount: int
    max_amount: int | None
    duration_months: int | None
    is_active: bool

    model_config = {"from_attributes": True}


class InterestProjectionResponse(BaseModel):
    """Projected interest, amounts in minor currency units."""
    principal: int
    annual_rate_percent: Decimal
    months: int
    gross_interest: int
    tax: int
    net_interest: int
    total_amount: int

    model_config = {"from_attributes": True}
