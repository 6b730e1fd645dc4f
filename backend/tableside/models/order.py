from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, String, Text, JSON, ForeignKey, DateTime, Numeric

from tableside.constants.roles import OrderStatus
from .base import Base, new_id, utcnow


class Order(Base):
    __tablename__ = 'orders'
    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    vendor_id: Mapped[str] = mapped_column(ForeignKey('vendors.id'), index=True, nullable=False)
    table_number: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, index=True, default=OrderStatus.KITCHEN.value)
    server: Mapped[str] = mapped_column(String(64), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2, asdecimal=True), nullable=False, default=Decimal('0'))
    payment_method: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow, index=True)

    items: Mapped[List['OrderItem']] = relationship(
        'OrderItem',
        back_populates='order',
        order_by='OrderItem.position',
        cascade='all, delete-orphan',
        lazy='selectin',
    )

    # UPDATE ... WHERE id=? AND version=? ; a concurrent writer makes the flush fail
    __mapper_args__ = {'version_id_col': version}


class OrderItem(Base):
    """One line of an order; ``name`` is copied from the menu when the line is added."""
    __tablename__ = 'order_items'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[str] = mapped_column(ForeignKey('orders.id', ondelete='CASCADE'), index=True, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    menu_item_id: Mapped[str] = mapped_column(String(32), nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(150), nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    item_table_number: Mapped[int] = mapped_column(Integer, nullable=False)
    addons: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    order = relationship('Order', back_populates='items')

__all__ = ["Order", "OrderItem"]
