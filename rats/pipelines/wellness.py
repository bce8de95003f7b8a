"""
Daily wellness log pipeline functions.
"""

from typing import Optional, Dict, Any

from common.utils.serialization import serialize_document
from rats.services.wellness.wellness_service import WellnessService


async def log_wellness_pipeline(
    wellness_service: WellnessService,
    user_id: str,
    data: Dict[str, Any]
) -> Dict[str, Any]:
    return serialize_document(await wellness_service.log_today(user_id, data))


async def get_today_wellness_pipeline(wellness_service: WellnessService, user_id: str) -> Optional[Dict[str, Any]]:
    log = await wellness_service.get_today(user_id)
    return serialize_document(log) if log else None
