import datetime
import logging

from tortoise.transactions import in_transaction

from ...common.pagination import build_pagination, compute_skip, normalize_page, normalize_page_size
from ...core.exceptions import NotFoundError, ValidationError
from ..inventory.models import Item
from .filters import SalesFilter
from .models import Sale, utcnow
from .schemas import PaginatedSalesResponse, SaleCreate, SaleResponse

logger = logging.getLogger(__name__)


def _to_sale_response(sale: Sale) -> SaleResponse:
    return SaleResponse(
        id=sale.public_id,
        item_id=sale.item.public_id,
        item_name=sale.item.name,
        quantity=sale.quantity,
        total_amount=sale.total_amount,
        sale_date=sale.sale_date,
        created_at=sale.created_at,
    )


async def record_sale(sale_in: SaleCreate) -> SaleResponse:
    """
    Records a sale and takes the sold units out of stock.

    The amount is the item's current price times the quantity. The stock
    check, the stock decrement and the sale insert run in one transaction.

    Raises:
        NotFoundError: If the item does not exist.
        ValidationError: If the stock does not cover the quantity.
    """
    sale_date = sale_in.sale_date or utcnow()
    if sale_date.tzinfo is None:
        sale_date = sale_date.replace(tzinfo=datetime.timezone.utc)

    async with in_transaction() as conn:
        item = await Item.filter(public_id=sale_in.item_id).using_db(conn).select_for_update().first()
        if not item:
            raise NotFoundError("Item")
        if item.quantity < sale_in.quantity:
            raise ValidationError(f"Not enough stock for {item.name}.")

        item.quantity -= sale_in.quantity
        await item.save(using_db=conn, update_fields=["quantity"])
        sale = await Sale.create(
            item=item,
            quantity=sale_in.quantity,
            total_amount=item.price * sale_in.quantity,
            sale_date=sale_date,
            using_db=conn,
        )

    logger.info(f"Recorded sale {sale.public_id}: {sale.quantity} x {item.name}")
    return _to_sale_response(sale)


async def list_sales(page: int, size: int, filters: SalesFilter) -> PaginatedSalesResponse:
    page, size = normalize_page(page), normalize_page_size(size)
    query = Sale.all()
    predicate = await filters.build()
    if predicate is not None:
        query = query.filter(predicate)

    total = await query.count()
    sales = (
        await query.prefetch_related("item")
        .order_by("-sale_date", "-id")
        .offset(compute_skip(page, size))
        .limit(size)
    )
    return PaginatedSalesResponse(
        sales=[_to_sale_response(sale) for sale in sales],
        pagination=build_pagination(page, size, total),
    )
