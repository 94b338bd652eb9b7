"""
Order endpoints — checkout and fulfillment status transitions.

Endpoints:
    POST   /orders                          — Create a pending order (authenticated)
    PATCH  /admin/orders/{order_id}/status  — Advance or cancel an order (admin)
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from deps import require_admin
from domain.responses import success_response
from middleware.auth import require_authenticated_user
from models import OrderCreateRequest, OrderStatusUpdateRequest
from utils.validators import validate_object_id, validated_order_id

logger = logging.getLogger(__name__)
router = APIRouter(tags=["orders"])


def _order_payload(order) -> dict:
    return {
        "id": order.id,
        "userId": order.user_id,
        "status": order.status,
        "orderedAt": order.ordered_at.isoformat() if order.ordered_at else None,
        "items": [
            {"productId": i.product_id, "name": i.name, "quantity": i.quantity}
            for i in order.items
        ],
    }


@router.post("/orders", status_code=201)
async def create_order(
    request: OrderCreateRequest,
    user_id: str = Depends(require_authenticated_user),
    db: AsyncSession = Depends(get_db),
):
    from services import order_service

    for line in request.items:
        validate_object_id(line.product_id, field="productId")

    order = await order_service.create_order(
        db,
        user_id=user_id,
        items=[{"product_id": line.product_id, "quantity": line.quantity} for line in request.items],
    )
    await db.commit()
    return success_response(data=_order_payload(order))


@router.patch("/admin/orders/{order_id}/status")
async def update_order_status(
    request: OrderStatusUpdateRequest,
    order_id: str = Depends(validated_order_id),
    admin_id: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    from services import order_service

    order = await order_service.advance_status(db, order_id=order_id, new_status=request.status)
    await db.commit()
    logger.info(f"Admin {admin_id[:8]}... set order {order_id} to {request.status.value}")
    return success_response(data=_order_payload(order))
