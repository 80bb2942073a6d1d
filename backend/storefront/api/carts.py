"""
Carts API Endpoints

Author: TM3
Date: 2025-10-17
"""
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from storefront.api.dependencies import get_cart_service, get_order_service
from storefront.domain.address import Address
from storefront.domain.cart import CartCreate, CartItemAdd, CartItemUpdate, ShoppingCart
from storefront.services.cart_service import CartService
from storefront.services.order_service import OrderService

router = APIRouter()


class CheckoutRequest(BaseModel):
    shipping_address: Optional[Address] = None


def _cart_response(cart: ShoppingCart) -> dict:
    return {"status": "success", "data": cart.to_dict()}


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_cart(data: CartCreate, service: CartService = Depends(get_cart_service)):
    return _cart_response(service.create_cart(data.customer_id))


@router.get("/{cart_id}")
def get_cart(cart_id: str, service: CartService = Depends(get_cart_service)):
    return _cart_response(service.get_cart(cart_id))


@router.post("/{cart_id}/items")
def add_cart_item(cart_id: str, data: CartItemAdd, service: CartService = Depends(get_cart_service)):
    return _cart_response(service.add_item(cart_id, data.product_id, data.quantity))


@router.patch("/{cart_id}/items/{product_id}")
def update_cart_item(
    cart_id: str,
    product_id: str,
    data: CartItemUpdate,
    service: CartService = Depends(get_cart_service),
):
    return _cart_response(service.update_item(cart_id, product_id, data.quantity))


@router.delete("/{cart_id}/items/{product_id}")
def remove_cart_item(cart_id: str, product_id: str, service: CartService = Depends(get_cart_service)):
    return _cart_response(service.remove_item(cart_id, product_id))


@router.post("/{cart_id}/checkout", status_code=status.HTTP_201_CREATED)
def checkout_cart(
    cart_id: str,
    data: Optional[CheckoutRequest] = None,
    service: OrderService = Depends(get_order_service),
):
    """Turn the cart into a pending order and empty the cart"""
    shipping_address = data.shipping_address if data else None
    order = service.checkout_cart(cart_id, shipping_address)
    return {"status": "success", "data": order.to_dict()}
