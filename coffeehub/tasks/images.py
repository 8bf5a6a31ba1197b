import logging
from celery import shared_task
from coffeehub.services.image_storage import ImageStorage

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=2, default_retry_delay=30)
def delete_product_image_task(self, image_path: str, base_dir: str) -> bool:
    """Remove a deleted product's image file; retried on I/O errors."""
    try:
        removed = ImageStorage(base_dir).delete(image_path)
    except OSError as exc:
        logger.error("Image cleanup failed for %s: %s", image_path, exc)
        raise self.retry(exc=exc)
    if not removed:
        logger.info("No stored image to remove at %s", image_path)
    return removed
