import logging
from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def notify_order_status_task(self, order_id: str, customer_id: str, status: str) -> None:
    """Log the customer notification for an order status change."""
    logger.info("[notify] customer %s: order %s is now %s", customer_id, order_id, status)
