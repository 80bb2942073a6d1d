"""
Customers API Endpoints

Author: TM3
Date: 2025-10-17
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from storefront.api.dependencies import get_customer_repository
from storefront.domain.address import Address
from storefront.domain.customer import Customer, CustomerCreate
from storefront.domain.email import Email
from storefront.domain.exceptions import DuplicateEntityError
from storefront.repositories.base import CustomerRepository

router = APIRouter()


class CustomerUpdate(BaseModel):
    """Schema for updating a customer"""
    name: Optional[str] = None
    email: Optional[str] = None
    shipping_address: Optional[Address] = None


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_customer(data: CustomerCreate, repo: CustomerRepository = Depends(get_customer_repository)):
    customer = Customer(
        name=data.name,
        email=Email(value=data.email),
        shipping_address=data.shipping_address,
    )
    if repo.find_by_email(customer.email.value) is not None:
        raise DuplicateEntityError("Customer", "email", customer.email.value)

    repo.save(customer)
    return {"status": "success", "data": customer.to_dict()}


@router.get("/")
def get_customers(
    email: Optional[str] = Query(None, description="Exact email address"),
    limit: int = Query(50, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    repo: CustomerRepository = Depends(get_customer_repository),
):
    if email is not None:
        found = repo.find_by_email(email)
        customers = [found] if found is not None else []
        total = len(customers)
    else:
        customers, total = repo.find_all(limit=limit, offset=offset)

    return {
        "status": "success",
        "total": total,
        "limit": limit,
        "offset": offset,
        "count": len(customers),
        "data": [customer.to_dict() for customer in customers],
    }


@router.get("/{customer_id}")
def get_customer(customer_id: str, repo: CustomerRepository = Depends(get_customer_repository)):
    return {"status": "success", "data": repo.get_or_raise(customer_id).to_dict()}


@router.patch("/{customer_id}")
def update_customer(
    customer_id: str,
    data: CustomerUpdate,
    repo: CustomerRepository = Depends(get_customer_repository),
):
    customer = repo.get_or_raise(customer_id)
    changes = data.model_dump(exclude_unset=True)

    if changes.get('name') is not None:
        customer.rename(changes['name'])
    if changes.get('email') is not None:
        customer.change_email(changes['email'])
    if 'shipping_address' in changes:
        customer.change_address(data.shipping_address)

    repo.save(customer)
    return {"status": "success", "data": customer.to_dict()}
