"""Products and their equipment units, plus the delete rules for brands, categories and suppliers."""

from __future__ import annotations

from sqlalchemy import desc, func, select, update
from sqlalchemy.orm import Session

from ..models.catalog import Brand, EquipmentItem, Product, ProductCategory
from ..models.contacts import Supplier
from .base import (
    ConflictError,
    InvalidReferenceError,
    create_owned,
    get_owned,
    name_taken,
    owns,
    update_owned,
)

PRODUCT_NAME_TAKEN = "Ya existe un producto con este nombre."
INVALID_CATEGORY = "La categoría seleccionada no es válida o no existe."
INVALID_BRAND = "La marca seleccionada no es válida o no existe."
INVALID_SUPPLIER = "Proveedor no encontrado o no pertenece al usuario."


def _serial_taken_message(numero_serie: str) -> str:
    return f"El número de serie '{numero_serie}' ya existe para este producto."


def _check_product_refs(db: Session, owner_id: str, data: dict) -> None:
    if "categoria_id" in data and not owns(db, ProductCategory, owner_id, data["categoria_id"]):
        raise InvalidReferenceError(INVALID_CATEGORY)
    marca_id = data.get("marca_id")
    if marca_id and not owns(db, Brand, owner_id, marca_id):
        raise InvalidReferenceError(INVALID_BRAND)


def create_product(db: Session, owner_id: str, data: dict) -> Product:
    _check_product_refs(db, owner_id, data)
    if name_taken(db, Product, owner_id, data["nombre"]):
        raise ConflictError(PRODUCT_NAME_TAKEN)
    payload = dict(data)
    payload["marca_id"] = payload.get("marca_id") or None
    return create_owned(db, Product, owner_id, payload, conflict_message=PRODUCT_NAME_TAKEN)


def update_product(db: Session, owner_id: str, product: Product, data: dict) -> Product:
    if "categoria_id" in data and data["categoria_id"] is None:
        raise InvalidReferenceError(INVALID_CATEGORY)
    _check_product_refs(db, owner_id, data)
    nombre = data.get("nombre")
    if nombre and name_taken(db, Product, owner_id, nombre, exclude_id=product.id):
        raise ConflictError("Ya existe otro producto con este nombre.")
    return update_owned(db, product, data, conflict_message=PRODUCT_NAME_TAKEN)


def _count_products(db: Session, owner_id: str, column, value: str) -> int:
    stmt = select(func.count()).select_from(Product).where(Product.user_id == owner_id, column == value)
    return db.scalar(stmt) or 0


def ensure_brand_unused(db: Session, owner_id: str, brand: Brand) -> None:
    count = _count_products(db, owner_id, Product.marca_id, brand.id)
    if count:
        raise ConflictError(f"No se puede eliminar la marca porque está asignada a {count} producto(s).")


def ensure_category_unused(db: Session, owner_id: str, category: ProductCategory) -> None:
    count = _count_products(db, owner_id, Product.categoria_id, category.id)
    if count:
        raise ConflictError(f"No se puede eliminar la categoría porque está asignada a {count} producto(s).")


def detach_supplier(db: Session, owner_id: str, supplier: Supplier) -> None:
    """Equipment bought from a supplier outlives it; only the link is dropped."""

    db.execute(
        update(EquipmentItem)
        .where(EquipmentItem.user_id == owner_id, EquipmentItem.proveedor_id == supplier.id)
        .values(proveedor_id=None)
    )


def list_items(db: Session, owner_id: str, product_id: str) -> list[EquipmentItem]:
    stmt = (
        select(EquipmentItem)
        .where(EquipmentItem.user_id == owner_id, EquipmentItem.producto_id == str(product_id))
        .order_by(desc(EquipmentItem.created_at), desc(EquipmentItem.id))
    )
    return list(db.execute(stmt).unique().scalars().all())


def get_item(db: Session, owner_id: str, product_id: str, item_id: str) -> EquipmentItem | None:
    item = get_owned(db, EquipmentItem, owner_id, item_id)
    if item is None or item.producto_id != str(product_id):
        return None
    return item


def _serial_taken(db: Session, owner_id: str, product_id: str, numero_serie: str, exclude_id: str | None = None) -> bool:
    stmt = select(EquipmentItem.id).where(
        EquipmentItem.user_id == owner_id,
        EquipmentItem.producto_id == str(product_id),
        EquipmentItem.numero_serie == numero_serie,
    )
    if exclude_id is not None:
        stmt = stmt.where(EquipmentItem.id != exclude_id)
    return db.execute(stmt).first() is not None


def create_item(db: Session, owner_id: str, product: Product, data: dict) -> EquipmentItem:
    proveedor_id = data.get("proveedor_id")
    if proveedor_id and not owns(db, Supplier, owner_id, proveedor_id):
        raise InvalidReferenceError(INVALID_SUPPLIER)
    numero_serie = data.get("numero_serie")
    if numero_serie and _serial_taken(db, owner_id, product.id, numero_serie):
        raise ConflictError(_serial_taken_message(numero_serie))
    payload = dict(data)
    payload["producto_id"] = product.id
    return create_owned(
        db,
        EquipmentItem,
        owner_id,
        payload,
        conflict_message=_serial_taken_message(numero_serie or ""),
    )


def update_item(db: Session, owner_id: str, item: EquipmentItem, data: dict) -> EquipmentItem:
    proveedor_id = data.get("proveedor_id")
    if proveedor_id and not owns(db, Supplier, owner_id, proveedor_id):
        raise InvalidReferenceError(INVALID_SUPPLIER)
    numero_serie = data.get("numero_serie")
    if numero_serie and _serial_taken(db, owner_id, item.producto_id, numero_serie, exclude_id=item.id):
        raise ConflictError(_serial_taken_message(numero_serie))
    data = {key: value for key, value in data.items() if key != "producto_id"}
    return update_owned(db, item, data, conflict_message=_serial_taken_message(numero_serie or ""))
