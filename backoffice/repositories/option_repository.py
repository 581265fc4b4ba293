"""Option catalog and order option persistence."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from backoffice.models.option import Option, OrderOption
from backoffice.repositories.base_repository import BaseRepository


class OptionRepository(BaseRepository):
    def get(self, option_id: str) -> Option | None:
        return self.session.get(Option, option_id)

    def get_many(self, option_ids: Iterable[str]) -> dict[str, Option]:
        ids = set(option_ids)
        if not ids:
            return {}
        rows = self.session.scalars(select(Option).where(Option.id.in_(ids)))
        return {row.id: row for row in rows}

    def list_active(self) -> list[Option]:
        stmt = select(Option).where(Option.active.is_(True)).order_by(Option.name.asc())
        return list(self.session.scalars(stmt))

    def attached_option_ids(self, order_id: str) -> set[str]:
        stmt = select(OrderOption.option_id).where(OrderOption.order_id == order_id)
        return set(self.session.scalars(stmt))

    def attach(self, order_id: str, option: Option, frozen_price: Decimal) -> OrderOption:
        order_option = OrderOption(order_id=order_id, option_id=option.id, option=option, frozen_price=frozen_price)
        self.session.add(order_option)
        return order_option

    def list_order_options(self, order_id: str) -> list[OrderOption]:
        stmt = (
            select(OrderOption)
            .options(selectinload(OrderOption.option))
            .where(OrderOption.order_id == order_id)
            .order_by(OrderOption.created_at.asc(), OrderOption.id.asc())
        )
        return list(self.session.scalars(stmt))
