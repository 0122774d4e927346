# storefront/services/notification_service.py
from typing import Any, Dict, List

from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Powiadomienia po zakupie, wysylane asynchronicznie przez Celery.
    Blad kolejkowania jest logowany i nie blokuje zamowienia.
    """

    @staticmethod
    def send_order_confirmation(
        transaction_id: int,
        email: str | None,
        total_amount: str,
        payment_id: str,
        lines: List[Dict[str, Any]],
    ) -> bool:
        try:
            send_order_confirmation_task.delay(transaction_id, email, total_amount, payment_id, lines)
            return True
        except Exception as e:
            logger.error(f"Failed to queue confirmation for transaction {transaction_id}: {e}")
            return False


def render_receipt(transaction_id: int, total_amount: str, payment_id: str, lines: List[Dict[str, Any]]) -> str:
    rows = [f"  {line['name']} x{line['quantity']}  {line['line_total']}" for line in lines]
    return "\n".join(
        [f"Order #{transaction_id}", *rows, f"Total: {total_amount}", f"Payment reference: {payment_id}"]
    )


@celery_app.task(name="storefront.services.notification_service.send_order_confirmation_task")
def send_order_confirmation_task(
    transaction_id: int,
    email: str | None,
    total_amount: str,
    payment_id: str,
    lines: List[Dict[str, Any]],
):
    """
    Celery task - tresc potwierdzenia. Dostarczanie SMTP jest poza tym serwisem,
    tutaj tylko logujemy.
    """
    if not email:
        logger.warning(f"[NOTIFICATION] Transaction {transaction_id}: no email on file, skipped")
        return {"transaction_id": transaction_id, "status": "skipped"}

    body = render_receipt(transaction_id, total_amount, payment_id, lines)
    logger.info(f"[NOTIFICATION] To {email}:\n{body}")

    return {"transaction_id": transaction_id, "email": email, "status": "sent"}
