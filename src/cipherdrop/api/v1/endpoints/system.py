"""System and transparency endpoints for the Cipherdrop API."""

from __future__ import annotations

from fastapi import APIRouter

from ..dependencies import ReaperDep, SettingsDep, StoreDep

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/stats")
async def get_store_stats(store: StoreDep, reaper: ReaperDep, settings: SettingsDep) -> dict[str, object]:
    """Return store occupancy, limits and expiry policy.

    No paste ids are exposed.

    Returns:
        Dictionary with store counters, capacity limits, TTL policy and
        Reaper progress
    """
    stats = store.stats()
    return {
        "store": {
            "entries": stats.entries,
            "total_bytes": stats.total_bytes,
            "shards": stats.shard_count,
        },
        "limits": {
            "max_entries": stats.max_entries,
            "max_total_bytes": stats.max_total_bytes,
            "max_payload_bytes": stats.max_payload_bytes,
        },
        "policy": {
            "default_ttl_seconds": settings.default_ttl_seconds,
            "max_ttl_seconds": settings.max_ttl_seconds,
            "allow_ttl_override": settings.allow_ttl_override,
            "burn_after_read": store.burn_after_read,
        },
        "reaper": {
            "running": reaper.running,
            "interval_seconds": reaper.interval,
            "sweeps": reaper.sweeps,
            "removed_total": reaper.removed_total,
        },
    }
