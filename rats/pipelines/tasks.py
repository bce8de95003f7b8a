"""
Collaborative task pipeline functions.
"""

import logging
from typing import Optional, List, Dict, Any

from common.utils.exceptions import NotFoundException
from common.utils.serialization import serialize_document
from rats.services.tasks.task_service import TaskService
from rats.services.user.badge_service import BadgeService
from rats.services.user.user_service import UserService

logger = logging.getLogger(__name__)


async def get_dashboard_pipeline(task_service: TaskService, user_id: str) -> Dict[str, List[Dict[str, Any]]]:
    dashboard = await task_service.get_dashboard(user_id)
    return {key: [serialize_document(t) for t in tasks] for key, tasks in dashboard.items()}


async def create_task_pipeline(
    task_service: TaskService,
    user_id: str,
    content: str,
    visibility: Optional[str] = None
) -> Dict[str, Any]:
    return serialize_document(await task_service.create_task(user_id, content, visibility))


async def update_task_pipeline(
    task_service: TaskService,
    user_service: UserService,
    badge_service: BadgeService,
    task_id: str,
    user_id: str,
    content: Optional[str] = None,
    is_completed: Optional[bool] = None,
    owner_xp: int = 10,
    collaborator_xp: int = 5
) -> Dict[str, Any]:
    """
    Update a task; completing it rewards the owner and collaborators.

    Args:
        task_service: For the update and permission checks
        user_service: For XP
        badge_service: For the owner's badge check
        task_id: Task ID
        user_id: Caller (owner or collaborator)
        content: New content (owner only)
        is_completed: New completion state
        owner_xp: XP for the owner on completion
        collaborator_xp: XP for each collaborator on completion

    Returns:
        {"updatedTask": ..., "newBadges": [...]}
    """
    task, just_completed = await task_service.update_task(
        task_id, user_id, content=content, is_completed=is_completed
    )

    new_badges: List[Dict[str, str]] = []
    if just_completed:
        await user_service.add_xp(task["owner"], owner_xp)
        new_badges = await badge_service.check_and_award(task["owner"])

        collaborators = task.get("collaborators") or []
        if collaborators:
            await user_service.add_xp_many(collaborators, collaborator_xp)

        logger.info(f"Task {task['_id']} completed; rewarded owner and {len(collaborators)} collaborators")

    expanded = await task_service.expand([task])
    return {"updatedTask": serialize_document(expanded[0]), "newBadges": new_badges}


async def delete_task_pipeline(task_service: TaskService, task_id: str, user_id: str) -> Dict[str, Any]:
    await task_service.delete_task(task_id, user_id)
    return {"id": task_id, "message": "Task removed"}


async def invite_pipeline(
    task_service: TaskService,
    user_service: UserService,
    task_id: str,
    owner_id: str,
    username: str
) -> Dict[str, Any]:
    """
    Invite a user by username.

    Raises:
        NotFoundException: Unknown username
    """
    invitee = await user_service.get_user_by_username(username)
    if not invitee:
        raise NotFoundException(message=f"User '{username}' not found.", code="USER_NOT_FOUND")

    task = await task_service.invite(task_id, owner_id, invitee)
    return {
        "task": serialize_document(task),
        "message": f"Invitation sent to {invitee['username']}",
    }


async def accept_invite_pipeline(task_service: TaskService, task_id: str, user_id: str) -> Dict[str, Any]:
    return serialize_document(await task_service.accept_invite(task_id, user_id))


async def reject_invite_pipeline(task_service: TaskService, task_id: str, user_id: str) -> Dict[str, Any]:
    await task_service.reject_invite(task_id, user_id)
    return {"message": "Invitation rejected.", "success": True}


async def request_join_pipeline(task_service: TaskService, task_id: str, user_id: str) -> Dict[str, Any]:
    task = await task_service.join_public(task_id, user_id)
    return {
        "message": "You have joined this goal successfully.",
        "task": serialize_document(task),
    }


async def accept_collab_pipeline(
    task_service: TaskService,
    task_id: str,
    owner_id: str,
    requester_id: str
) -> Dict[str, Any]:
    return serialize_document(
        await task_service.accept_collaboration_request(task_id, owner_id, requester_id)
    )
