from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Boolean, ForeignKey, DateTime, Numeric, UniqueConstraint

from .base import Base, new_id, utcnow


class MenuItem(Base):
    # Owned by the catalog service; the order core only reads price and name.
    __tablename__ = 'menu_items'
    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    vendor_id: Mapped[str] = mapped_column(ForeignKey('vendors.id'), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2, asdecimal=True), nullable=False, default=Decimal('0'))
    category: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (UniqueConstraint('vendor_id', 'name', name='uq_menu_item_vendor_name'),)

__all__ = ["MenuItem"]
