"""
Background tasks for outbound email.

Controllers schedule these through FastAPI BackgroundTasks so the
response is not held up by the Redis push.
"""

import logging

from src.clients.redis_client import RedisClient

logger = logging.getLogger(__name__)


class EmailTask:
    """Queues transactional emails for the mail worker"""

    WELCOME_TEMPLATE = "course_welcome"
    PURCHASE_TEMPLATE = "purchase_receipt"

    def __init__(self, redis_client: RedisClient):
        self._redis_client = redis_client

    async def send_course_welcome(self, to: str, full_name: str, course_title: str, course_slug: str):
        await self._enqueue(
            self.WELCOME_TEMPLATE,
            to,
            {"full_name": full_name, "course_title": course_title, "course_slug": course_slug},
        )

    async def send_purchase_receipt(
            self, to: str, full_name: str, course_title: str, amount: int, currency: str
    ):
        await self._enqueue(
            self.PURCHASE_TEMPLATE,
            to,
            {
                "full_name": full_name,
                "course_title": course_title,
                "amount": amount,
                "currency": currency,
            },
        )

    async def _enqueue(self, template: str, to: str, context: dict):
        queued = await self._redis_client.enqueue_email(template, to, context)
        if queued:
            logger.info(f"Email '{template}' queued for {to}")
