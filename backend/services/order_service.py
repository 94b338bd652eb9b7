"""
Order service — the entitlement store.

Read side (used by the access evaluator and the library):
    - find_qualifying_order: any entitling order listing a given book
    - list_entitled_book_ids: every book the user may open

Write side (checkout + fulfillment hooks, never called by the evaluator):
    - create_order: records a pending order
    - advance_status: forward-only status transitions, cancellation allowed
      until delivery
"""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import Book, Order, OrderItem
from domain.constants import ENTITLING_STATUSES, ORDER_STATUS_SEQUENCE
from domain.enums import OrderStatus
from domain.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

_ENTITLING_VALUES = [s.value for s in ENTITLING_STATUSES]


async def find_qualifying_order(
    db: AsyncSession,
    *,
    user_id: str,
    book_id: str,
) -> Order | None:
    """
    Return one entitling order of `user_id` that lists `book_id`, or None.

    Any single match is sufficient; repeat purchases are not distinguished.
    """
    result = await db.execute(
        select(Order)
        .join(OrderItem, OrderItem.order_id == Order.id)
        .where(
            Order.user_id == user_id,
            OrderItem.product_id == book_id,
            Order.status.in_(_ENTITLING_VALUES),
        )
        .limit(1)
    )
    return result.scalars().first()


async def list_entitled_book_ids(db: AsyncSession, *, user_id: str) -> list[str]:
    """Distinct book ids across the user's entitling orders, newest order first."""
    result = await db.execute(
        select(OrderItem.product_id, Order.ordered_at)
        .join(Order, OrderItem.order_id == Order.id)
        .where(
            Order.user_id == user_id,
            Order.status.in_(_ENTITLING_VALUES),
        )
        .order_by(Order.ordered_at.desc(), OrderItem.position)
    )
    seen: dict[str, None] = {}
    for product_id, _ in result.all():
        seen.setdefault(product_id, None)
    return list(seen)


async def create_order(
    db: AsyncSession,
    *,
    user_id: str,
    items: list[dict],
) -> Order:
    """
    Record a checkout as a pending order.

    items: [{"product_id": str, "quantity": int}, ...]; each book at most once.
    """
    product_ids = [item["product_id"] for item in items]
    if len(set(product_ids)) != len(product_ids):
        raise ValidationError("Each book may appear only once per order", field="items")

    res = await db.execute(select(Book).where(Book.id.in_(product_ids)))
    books = {b.id: b for b in res.scalars().all()}
    missing = [pid for pid in product_ids if pid not in books]
    if missing:
        raise NotFoundError("Book", missing[0])

    order = Order(user_id=user_id, status=OrderStatus.PENDING.value)
    for position, item in enumerate(items):
        order.items.append(
            OrderItem(
                product_id=item["product_id"],
                name=books[item["product_id"]].title,
                quantity=item.get("quantity", 1),
                position=position,
            )
        )
    db.add(order)
    await db.flush()
    logger.info(f"Order {order.id} created for user {user_id[:8]}... ({len(items)} item(s))")
    return order


def _can_transition(current: OrderStatus, new: OrderStatus) -> bool:
    if current in (OrderStatus.CANCELLED, OrderStatus.DELIVERED):
        return False
    if new == OrderStatus.CANCELLED:
        return True
    return ORDER_STATUS_SEQUENCE.index(new) > ORDER_STATUS_SEQUENCE.index(current)


async def advance_status(
    db: AsyncSession,
    *,
    order_id: str,
    new_status: OrderStatus,
) -> Order:
    """Move an order forward (skipping steps is allowed) or cancel it."""
    res = await db.execute(select(Order).where(Order.id == order_id))
    order = res.scalar_one_or_none()
    if not order:
        raise NotFoundError("Order", order_id)

    current = OrderStatus(order.status)
    if not _can_transition(current, new_status):
        raise ConflictError(
            f"Order cannot move from {current.value} to {new_status.value}",
            details={"orderId": order_id, "from": current.value, "to": new_status.value},
        )

    order.status = new_status.value
    await db.flush()
    logger.info(f"Order {order_id} status {current.value} -> {new_status.value}")
    return order
