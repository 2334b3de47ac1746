"""
Product service — read access to the deposit product catalog.

The catalog itself is maintained by an external service; this module only
looks products up for account opening and interest projection.
"""

from sqlalchemy import select
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from bank_ledger.exceptions import ProductNotFoundError, StorageError
from bank_ledger.models.product import Product


async def get_product(db: AsyncSession, product_id: int) -> Product:
    """
    Get a product by ID.

    Raises:
        ProductNotFoundError: If the product doesn't exist.
    """
    try:
        result = await db.execute(select(Product).where(Product.id == product_id))
    except (OperationalError, InterfaceError) as exc:
        raise StorageError() from exc
    product = result.scalar_one_or_none()

    if product is None:
        raise ProductNotFoundError(product_id)

    return product


async def list_products(db: AsyncSession, active_only: bool = False) -> list[Product]:
    query = select(Product).order_by(Product.id)
    if active_only:
        query = query.where(Product.is_active.is_(True))

    try:
        result = await db.execute(query)
    except (OperationalError, InterfaceError) as exc:
        raise StorageError() from exc
    return list(result.scalars().all())
