"""
Orders API Endpoints
Order placement, queries and lifecycle transitions

Author: TM3
Date: 2025-10-17
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from storefront.api.dependencies import get_order_service
from storefront.domain.order import Order, OrderCreate, OrderStatus, StatusChange
from storefront.services.order_service import OrderService

router = APIRouter()


def _order_response(order: Order) -> dict:
    return {"status": "success", "data": order.to_dict()}


@router.post("/", status_code=status.HTTP_201_CREATED)
def place_order(data: OrderCreate, service: OrderService = Depends(get_order_service)):
    """Place a pending order and reserve stock for its items"""
    order = service.place_order(
        data.customer_id,
        [line.as_tuple() for line in data.items],
        data.shipping_address,
    )
    return _order_response(order)


@router.get("/")
def get_orders(
    customer_id: Optional[str] = Query(None, description="Filter by customer"),
    order_status: Optional[OrderStatus] = Query(None, alias="status", description="Filter by order status"),
    limit: int = Query(50, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    service: OrderService = Depends(get_order_service),
):
    """
    Get orders with optional filters

    Returns orders with their items and totals
    """
    orders, total = service.list_orders(
        customer_id=customer_id,
        status=order_status,
        limit=limit,
        offset=offset,
    )

    return {
        "status": "success",
        "total": total,
        "limit": limit,
        "offset": offset,
        "count": len(orders),
        "data": [order.to_dict() for order in orders],
    }


@router.get("/{order_id}")
def get_order(order_id: str, service: OrderService = Depends(get_order_service)):
    return _order_response(service.get_order(order_id))


@router.post("/{order_id}/confirm")
def confirm_order(order_id: str, service: OrderService = Depends(get_order_service)):
    return _order_response(service.confirm_order(order_id))


@router.post("/{order_id}/ship")
def ship_order(order_id: str, service: OrderService = Depends(get_order_service)):
    return _order_response(service.ship_order(order_id))


@router.post("/{order_id}/deliver")
def deliver_order(order_id: str, service: OrderService = Depends(get_order_service)):
    return _order_response(service.deliver_order(order_id))


@router.post("/{order_id}/cancel")
def cancel_order(
    order_id: str,
    change: Optional[StatusChange] = None,
    service: OrderService = Depends(get_order_service),
):
    """Cancel a pending or confirmed order; reserved stock is released"""
    reason = change.reason if change else None
    return _order_response(service.cancel_order(order_id, reason))
