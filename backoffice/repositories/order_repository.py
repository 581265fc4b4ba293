"""Order persistence."""

from __future__ import annotations

from sqlalchemy import select, update

from backoffice.models.base import utcnow
from backoffice.models.enums import OrderStatus
from backoffice.models.order import Order
from backoffice.repositories.base_repository import BaseRepository


class OrderRepository(BaseRepository):
    def get(self, order_id: str) -> Order | None:
        return self.session.get(Order, order_id)

    def list_by_customer(self, customer_ref: str) -> list[Order]:
        stmt = select(Order).where(Order.customer_ref == customer_ref).order_by(Order.created_at.desc())
        return list(self.session.scalars(stmt))

    def transition_status(self, order_id: str, current: OrderStatus, target: OrderStatus) -> bool:
        stmt = (
            update(Order)
            .where(Order.id == order_id, Order.status == current)
            .values(status=target, updated_at=utcnow())
        )
        return self.session.execute(stmt).rowcount == 1
