import hashlib
import json
import logging
from typing import Optional
from redis.asyncio import Redis
from fastapi import Request

from cinema_booking.core.exceptions import IdempotencyConflictError

IDEMPOTENCY_HEADER = "X-Idempotency-Key"


def idempotency_redis_key(idem_key: str) -> str:
    return f"idempotency:booking:{idem_key}"


def compute_request_hash(request_data: dict) -> str:
    serialized = json.dumps(request_data, sort_keys=True)
    return hashlib.sha256(serialized.encode()).hexdigest()


async def check_idempotency(request: Request, redis: Redis, request_hash: str):
    """
    Look up a stored response for the request's idempotency key.
    Returns (key, cached_response, is_repeat). Redis is only contacted
    when the client sent the header. A key reused with a different
    request body raises IdempotencyConflictError.
    """
    idem_key: Optional[str] = request.headers.get(IDEMPOTENCY_HEADER)
    if not idem_key:
        return None, None, False
    try:
        cached = await redis.get(idempotency_redis_key(idem_key))
    except Exception as e:
        # the seat row lock still prevents a double booking
        logging.error(f"failed to check idempotency key {idem_key}: {e}", exc_info=True)
        return idem_key, None, False
    if not cached:
        return idem_key, None, False
    entry = json.loads(cached)
    if entry["request_hash"] != request_hash:
        raise IdempotencyConflictError()
    return idem_key, entry["response"], True


async def save_idempotency(redis: Redis, idem_key: Optional[str], request_hash: str, response: dict, ttl: int):
    if not idem_key:
        return
    entry = {"request_hash": request_hash, "response": response}
    try:
        await redis.set(idempotency_redis_key(idem_key), json.dumps(entry), ex=ttl)
    except Exception as e:
        # booking is already committed at this point
        logging.error(f"failed to save idempotency key {idem_key}: {e}", exc_info=True)
