"""
Standard API response helpers.

Provides the success envelope used by every route. Errors are rendered
by FastAPI from the APIException detail.

Example:
    from common.utils import success_response

    @router.get("/wellness/today")
    async def get_today(...):
        log = await wellness_service.get_today_log(user_id)
        return success_response(log)
"""

from typing import Any, Optional, Dict


def success_response(
    data: Any = None,
    message: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create a standard success response.

    Args:
        data: The response data (can be dict, list, or any serializable type)
        message: Optional success message

    Returns:
        Dictionary with success=True and optional data/message
    """
    response: Dict[str, Any] = {"success": True}

    if data is not None:
        response["data"] = data

    if message:
        response["message"] = message

    return response

