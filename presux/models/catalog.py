"""Catalog tables: brands, categories, products and the physical units of each product."""

from __future__ import annotations

from sqlalchemy import Column, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from ..db.session import Base
from .common import OwnedRecord


class Brand(OwnedRecord, Base):
    __tablename__ = "marcas"
    __table_args__ = (UniqueConstraint("user_id", "nombre", name="uq_marcas_user_nombre"),)

    nombre = Column(Text, nullable=False)


class ProductCategory(OwnedRecord, Base):
    __tablename__ = "categorias_producto"
    __table_args__ = (UniqueConstraint("user_id", "nombre", name="uq_categorias_producto_user_nombre"),)

    nombre = Column(Text, nullable=False)


class Product(OwnedRecord, Base):
    __tablename__ = "productos"
    __table_args__ = (UniqueConstraint("user_id", "nombre", name="uq_productos_user_nombre"),)
    __allow_unmapped__ = True

    nombre = Column(Text, nullable=False)
    descripcion = Column(Text, nullable=True)
    stock = Column(Integer, nullable=False, default=0)
    categoria_id = Column(String(36), ForeignKey("categorias_producto.id"), nullable=False, index=True)
    marca_id = Column(String(36), ForeignKey("marcas.id"), nullable=True, index=True)
    modelo = Column(Text, nullable=True)
    precio_alquiler = Column(Float, nullable=True)
    precio_compra_referencia = Column(Float, nullable=True)

    categoria = relationship("ProductCategory", lazy="joined")
    marca = relationship("Brand", lazy="joined")
    items = relationship("EquipmentItem", back_populates="producto", cascade="all, delete-orphan")

    @property
    def categoria_nombre(self) -> str | None:
        return self.categoria.nombre if self.categoria else None

    @property
    def marca_nombre(self) -> str | None:
        return self.marca.nombre if self.marca else None


class EquipmentItem(OwnedRecord, Base):
    """A single serialised unit of a product (the thing that gets rented out)."""

    __tablename__ = "equipo_items"
    __table_args__ = (
        UniqueConstraint("user_id", "producto_id", "numero_serie", name="uq_equipo_item_user_producto_nserie"),
    )
    __allow_unmapped__ = True

    producto_id = Column(String(36), ForeignKey("productos.id"), nullable=False, index=True)
    numero_serie = Column(Text, nullable=True)
    notas_internas = Column(Text, nullable=True)
    estado = Column(String(20), nullable=False, default="DISPONIBLE")
    fecha_compra = Column(Text, nullable=True)
    precio_compra = Column(Float, nullable=True)
    proveedor_id = Column(String(36), ForeignKey("proveedores.id"), nullable=True, index=True)

    producto = relationship("Product", back_populates="items")
    proveedor = relationship("Supplier", lazy="joined")

    @property
    def producto_nombre(self) -> str | None:
        return self.producto.nombre if self.producto else None

    @property
    def proveedor_nombre(self) -> str | None:
        return self.proveedor.nombre if self.proveedor else None


__all__ = ["Brand", "EquipmentItem", "Product", "ProductCategory"]
