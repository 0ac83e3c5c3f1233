from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from app.models.application import APPLICATION_STATUSES

RECENT_WINDOW = timedelta(days=7)


def empty_breakdown() -> Dict[str, int]:
    return {status: 0 for status in APPLICATION_STATUSES}


async def status_breakdown(collection, query: Optional[Dict[str, Any]] = None) -> Dict[str, int]:
    """Count matching applications per status; every status is always present."""
    pipeline = []
    if query:
        pipeline.append({"$match": query})
    pipeline.append({"$group": {"_id": "$status", "count": {"$sum": 1}}})

    breakdown = empty_breakdown()
    async for row in collection.aggregate(pipeline):
        if row["_id"] in breakdown:
            breakdown[row["_id"]] = row["count"]
    return breakdown


async def overview(collection, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or datetime.now(timezone.utc)
    since = now - RECENT_WINDOW

    total = await collection.count_documents({})
    recent = await collection.count_documents({"createdAt": {"$gte": since}})

    return {
        "totalApplications": total,
        "recentApplications": recent,
        "statusBreakdown": await status_breakdown(collection),
    }
