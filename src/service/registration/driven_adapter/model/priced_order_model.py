from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.platform.database.orm_db_setting import Base


class PricedOrderModel(Base):
    __tablename__ = 'priced_orders'

    order_id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    order_version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    reservation_expiration_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    lines: Mapped[List['PricedOrderLineModel']] = relationship(
        'PricedOrderLineModel',
        back_populates='priced_order',
        cascade='all, delete-orphan',
        order_by='PricedOrderLineModel.position',
        lazy='selectin',
    )


class PricedOrderLineModel(Base):
    __tablename__ = 'priced_order_lines'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey('priced_orders.order_id'), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    line_total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    priced_order: Mapped[PricedOrderModel] = relationship(
        'PricedOrderModel', back_populates='lines'
    )
