# app/repos/payment_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.data.models.payment import PaymentModel


class PaymentRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_payment(self, payment: PaymentModel) -> PaymentModel:
        self.db.add(payment)
        self.db.flush()
        return payment

    def get_by_order(self, order_id) -> PaymentModel | None:
        return self.db.execute(
            select(PaymentModel).where(PaymentModel.order_id == order_id)
        ).scalar_one_or_none()

    def lock_by_provider_order(self, provider_order_id: str) -> PaymentModel | None:
        """SELECT ... FOR UPDATE po id zamowienia u dostawcy."""
        return self.db.execute(
            select(PaymentModel)
            .where(PaymentModel.provider_order_id == provider_order_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def lock_payment(self, payment_id) -> PaymentModel | None:
        return self.db.execute(
            select(PaymentModel)
            .where(PaymentModel.id == payment_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
