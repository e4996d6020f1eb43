# app/repos/order_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def add_order_item(self, item: OrderItemModel) -> OrderItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def get_order(self, order_id) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_order_items(self, order_id) -> list[OrderItemModel]:
        return list(
            self.db.execute(
                select(OrderItemModel)
                .where(OrderItemModel.order_id == order_id)
                .order_by(OrderItemModel.id)
            ).scalars()
        )

    def list_orders(self, limit: int) -> list[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel).order_by(OrderModel.created_at.desc()).limit(limit)
            ).scalars()
        )

    def set_status_if(self, order: OrderModel, expected: str, status: str) -> bool:
        # przejscie tylko z oczekiwanego stanu, inaczej nic nie rob
        if order.status != expected:
            return False
        order.status = status
        self.db.flush()
        return True
