# app/routers/customers.py
from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.customer import CustomerCreate, CustomerOut
from app.services.vehicle_service import create_customer, get_customer, list_customers
from app.utils.pagination import paginate

router = APIRouter()


@router.get("/customers", summary="List customers")
def get_customers(limit: Optional[int] = None, offset: int = 0, db: Session = Depends(get_db)):
    page = paginate(list_customers(db), limit, offset)
    page["rows"] = [CustomerOut.model_validate(c) for c in page["rows"]]
    return page


@router.get("/customers/{customer_id}", response_model=CustomerOut)
def get_one_customer(customer_id: int, db: Session = Depends(get_db)):
    return get_customer(db, customer_id)


@router.post("/customers", response_model=CustomerOut, status_code=status.HTTP_201_CREATED)
def register_customer(body: CustomerCreate, db: Session = Depends(get_db)):
    return create_customer(db, body)
