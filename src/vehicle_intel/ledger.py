"""Usage ledger — price tiers, call recording, and analytics queries.

Every tool invocation is recorded with the price tier of its tool. The
analytics tools read from here. Lookups in ``core`` never touch the ledger.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from time import perf_counter
from typing import AsyncIterator, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from .db import session_scope
from .sqlmodels import ToolCall

logger = logging.getLogger(__name__)

# Price per call in base units (1000 = $0.001).
PRICE_TIERS: dict[str, int] = {
    "vehicle_overview": 0,
    "vehicle_decode_vin": 1000,
    "vehicle_recalls_by_vin": 2000,
    "vehicle_models": 2000,
    "vehicle_complaints": 3000,
    "vehicle_compare": 5000,
    "vehicle_analytics": 0,
    "vehicle_analytics_transactions": 0,
}

STATUS_OK = "ok"
STATUS_ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def price_for(tool: str) -> int:
    return PRICE_TIERS.get(tool, 0)


async def record_call(tool: str, status: str, duration_ms: int) -> None:
    """Append one call to the ledger. A failed write is logged, never raised."""
    try:
        async with session_scope() as session:
            session.add(ToolCall(
                tool=tool,
                amount=price_for(tool),
                status=status,
                duration_ms=duration_ms,
                created_at=_utcnow(),
            ))
    except SQLAlchemyError as exc:
        logger.warning("Failed to record %s call in usage ledger: %s", tool, exc)


@asynccontextmanager
async def metered(tool: str) -> AsyncIterator[None]:
    """Record the enclosed tool call with its outcome and duration."""
    started = perf_counter()
    status = STATUS_OK
    try:
        yield
    except BaseException:
        # Cancellation counts as a failed call, not a paid one.
        status = STATUS_ERROR
        raise
    finally:
        duration_ms = int((perf_counter() - started) * 1000)
        await record_call(tool, status, duration_ms)


def _window_start(window_ms: Optional[int]) -> Optional[datetime]:
    if not window_ms:
        return None
    return _utcnow() - timedelta(milliseconds=window_ms)


async def get_summary(window_ms: Optional[int] = None) -> dict:
    """Aggregate call counts and totals, optionally over the last ``window_ms``.

    Totals are returned as strings so large base-unit sums survive JSON.
    """
    start = _window_start(window_ms)

    async with session_scope() as session:
        query = select(
            ToolCall.tool,
            ToolCall.status,
            func.count(ToolCall.id),
            func.coalesce(func.sum(ToolCall.amount), 0),
        ).group_by(ToolCall.tool, ToolCall.status)
        if start is not None:
            query = query.where(ToolCall.created_at >= start)
        result = await session.execute(query)
        rows = result.all()

    total_calls = 0
    paid_calls = 0
    failed_calls = 0
    incoming_total = 0
    by_tool: dict[str, int] = {}
    for tool, status, count, amount in rows:
        total_calls += count
        by_tool[tool] = by_tool.get(tool, 0) + count
        if status == STATUS_ERROR:
            failed_calls += count
            continue
        if price_for(tool) > 0:
            paid_calls += count
        incoming_total += amount

    return {
        "totalCalls": total_calls,
        "paidCalls": paid_calls,
        "failedCalls": failed_calls,
        "incomingTotal": str(incoming_total),
        "outgoingTotal": "0",
        "netTotal": str(incoming_total),
        "byTool": by_tool,
        "windowMs": window_ms,
    }


async def get_transactions(window_ms: Optional[int] = None, limit: int = 50) -> list[dict]:
    """Most recent calls first."""
    start = _window_start(window_ms)

    async with session_scope() as session:
        query = select(ToolCall).order_by(ToolCall.created_at.desc(), ToolCall.id.desc())
        if start is not None:
            query = query.where(ToolCall.created_at >= start)
        result = await session.execute(query.limit(limit))
        rows = result.scalars().all()

    return [
        {
            "id": r.id,
            "tool": r.tool,
            "amount": str(r.amount),
            "status": r.status,
            "durationMs": r.duration_ms,
            "createdAt": r.created_at.isoformat(),
        }
        for r in rows
    ]
