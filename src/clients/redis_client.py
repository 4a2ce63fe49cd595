"""
Redis client for checkout locking and the outbound email queue.

Features:
    - Short distributed lock per (user, course) so a double click cannot
      open two checkout sessions
    - Email jobs pushed as JSON onto a list for an external mail worker
    - Every operation degrades to a no-op when Redis is not configured
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import Optional, Dict, Any

import redis.asyncio as redis
from redis.asyncio import Redis
from redis.exceptions import LockError, RedisError

from src.config import Settings

logger = logging.getLogger(__name__)


class RedisClient:
    """Redis client for locking and the email queue"""

    EMAIL_QUEUE_KEY = "lms:email:queue"

    def __init__(self, settings: Settings):
        self._redis_url = settings.redis_url
        self._lock_ttl = settings.checkout_lock_ttl
        self._client: Optional[Redis] = None

    async def connect(self):
        """Establish Redis connection"""
        if not self._redis_url:
            logger.warning("Redis URL not configured, Redis features disabled")
            return

        try:
            self._client = redis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True
            )
            await self._client.ping()
            logger.info("Redis connection established successfully")
        except RedisError as e:
            logger.error(f"Failed to connect to Redis: {e}")
            self._client = None

    async def disconnect(self):
        """Close Redis connection"""
        if self._client:
            await self._client.aclose()
            logger.info("Redis connection closed")

    def is_available(self) -> bool:
        """Check if Redis is available"""
        return self._client is not None

    # =============================
    #   Checkout Lock
    # =============================
    @staticmethod
    def _checkout_lock_key(user_id: int, course_id: int) -> str:
        return f"lms:checkout:lock:{user_id}:{course_id}"

    @asynccontextmanager
    async def acquire_checkout_lock(self, user_id: int, course_id: int):
        """
        Acquire the checkout lock for a learner and course.

        Raises:
            LockError: If another checkout for the same pair is in flight
        """
        if not self.is_available():
            logger.debug("Redis not available, skipping checkout lock")
            yield True
            return

        lock = self._client.lock(
            self._checkout_lock_key(user_id, course_id),
            timeout=self._lock_ttl,
            blocking=False,
        )

        acquired = await lock.acquire(blocking=False)
        if not acquired:
            raise LockError(f"Checkout already in progress for user {user_id}, course {course_id}")

        logger.debug(f"Acquired checkout lock for user {user_id}, course {course_id}")
        try:
            yield True
        finally:
            try:
                await lock.release()
            except LockError:
                # Lock expired before release
                pass

    # =============================
    #   Email Queue
    # =============================
    async def enqueue_email(self, template: str, to: str, context: Dict[str, Any]) -> bool:
        """
        Push an email job onto the queue.

        Args:
            template: Template name the mail worker renders (e.g. "welcome")
            to: Recipient address
            context: Template variables

        Returns:
            True if queued, False if Redis is unavailable or the push failed
        """
        if not self.is_available():
            logger.info(f"Redis not available, dropping '{template}' email to {to}")
            return False

        job = json.dumps({"template": template, "to": to, "context": context})
        try:
            await self._client.rpush(self.EMAIL_QUEUE_KEY, job)
            logger.debug(f"Queued '{template}' email to {to}")
            return True
        except RedisError as e:
            logger.error(f"Failed to queue email: {e}")
            return False
