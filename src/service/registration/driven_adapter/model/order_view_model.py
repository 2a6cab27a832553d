from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.platform.database.orm_db_setting import Base


class OrderViewModel(Base):
    __tablename__ = 'orders_view'

    order_id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    conference_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    order_version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    state: Mapped[str] = mapped_column(String(32), nullable=False)
    reservation_expiration_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    registrant_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    lines: Mapped[List['OrderItemViewModel']] = relationship(
        'OrderItemViewModel',
        back_populates='order',
        cascade='all, delete-orphan',
        order_by='OrderItemViewModel.id',
        lazy='selectin',
    )


class OrderItemViewModel(Base):
    __tablename__ = 'order_items_view'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey('orders_view.order_id'), nullable=False, index=True
    )
    seat_type: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    requested_seats: Mapped[int] = mapped_column(Integer, nullable=False)
    reserved_seats: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    order: Mapped[OrderViewModel] = relationship('OrderViewModel', back_populates='lines')
