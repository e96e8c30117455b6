# storefront/api/products.py
# Каталог: чтение для всех авторизованных, изменение только для admin.
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from storefront.core.security import get_current_user, get_db, require_admin
from storefront.schemas.product import ProductIn, ProductOut
from storefront.services import catalog

router = APIRouter()


@router.get("", response_model=List[ProductOut], dependencies=[Depends(get_current_user)])
def list_products(db: Session = Depends(get_db)):
    return catalog.list_products(db)


@router.get("/{product_id}", response_model=ProductOut, dependencies=[Depends(get_current_user)])
def get_product(product_id: int, db: Session = Depends(get_db)):
    return catalog.get_product(db, product_id)


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
def create_product(payload: ProductIn, db: Session = Depends(get_db)):
    return catalog.create_product(db, payload)


@router.put("/{product_id}", response_model=ProductOut, dependencies=[Depends(require_admin)])
def update_product(product_id: int, payload: ProductIn, db: Session = Depends(get_db)):
    return catalog.update_product(db, product_id, payload)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_admin)])
def delete_product(product_id: int, db: Session = Depends(get_db)):
    catalog.delete_product(db, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
