"""
Discoveries view
"""

from typing import Any, Dict, List

from core.storage import Storage, WriteResult
from models.entities import Discovery, DiscoveryImpact

from . import RecordNotFoundError


def sort_discoveries(discoveries: List[Discovery]) -> List[Discovery]:
    """Pinned first, then newest trace date"""
    newest_first = sorted(
        discoveries, key=lambda d: d.trace_date or d.date_added, reverse=True
    )
    return sorted(newest_first, key=lambda d: not d.pinned)


def build_discoveries_view(discoveries: List[Discovery]) -> Dict[str, Any]:
    by_impact = {impact.value: 0 for impact in DiscoveryImpact}
    for discovery in discoveries:
        by_impact[discovery.impact.value] += 1
    return {
        "discoveries": [d.model_dump(mode="json") for d in sort_discoveries(discoveries)],
        "total": len(discoveries),
        "byImpact": by_impact,
    }


async def toggle_pin(storage: Storage, discovery_id: str) -> WriteResult:
    discovery = next((d for d in storage.get_discoveries() if d.id == discovery_id), None)
    if discovery is None:
        raise RecordNotFoundError("Discovery", discovery_id)
    return await storage.update_discovery(
        discovery.model_copy(update={"pinned": not discovery.pinned})
    )
