"""
FastAPI router for collaborative task endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from common.utils import success_response
from rats.config import settings
from rats.dependencies import require_auth, get_task_service, get_user_service, get_badge_service
from rats.pipelines import tasks as pipelines
from rats.schemas.tasks import CreateTaskRequest, UpdateTaskRequest, InviteRequest, AcceptCollabRequest
from rats.services.tasks.task_service import TaskService
from rats.services.user.badge_service import BadgeService
from rats.services.user.user_service import UserService

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("/dashboard")
async def get_dashboard(
    user: Annotated[dict, Depends(require_auth)],
    task_service: Annotated[TaskService, Depends(get_task_service)],
):
    """Owned, collaborating, invited and joinable public tasks."""
    result = await pipelines.get_dashboard_pipeline(task_service=task_service, user_id=str(user["_id"]))
    return success_response(result)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(
    body: CreateTaskRequest,
    user: Annotated[dict, Depends(require_auth)],
    task_service: Annotated[TaskService, Depends(get_task_service)],
):
    result = await pipelines.create_task_pipeline(
        task_service=task_service,
        user_id=str(user["_id"]),
        content=body.content,
        visibility=body.visibility,
    )
    return success_response(result)


@router.put("/{task_id}")
async def update_task(
    task_id: str,
    body: UpdateTaskRequest,
    user: Annotated[dict, Depends(require_auth)],
    task_service: Annotated[TaskService, Depends(get_task_service)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    badge_service: Annotated[BadgeService, Depends(get_badge_service)],
):
    """Update content or completion; completing rewards the whole team."""
    result = await pipelines.update_task_pipeline(
        task_service=task_service,
        user_service=user_service,
        badge_service=badge_service,
        task_id=task_id,
        user_id=str(user["_id"]),
        content=body.content,
        is_completed=body.isCompleted,
        owner_xp=settings.XP_TASK_OWNER,
        collaborator_xp=settings.XP_TASK_COLLABORATOR,
    )
    return success_response(result)


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    user: Annotated[dict, Depends(require_auth)],
    task_service: Annotated[TaskService, Depends(get_task_service)],
):
    result = await pipelines.delete_task_pipeline(
        task_service=task_service,
        task_id=task_id,
        user_id=str(user["_id"]),
    )
    return success_response(result)


@router.post("/{task_id}/invite")
async def invite(
    task_id: str,
    body: InviteRequest,
    user: Annotated[dict, Depends(require_auth)],
    task_service: Annotated[TaskService, Depends(get_task_service)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    result = await pipelines.invite_pipeline(
        task_service=task_service,
        user_service=user_service,
        task_id=task_id,
        owner_id=str(user["_id"]),
        username=body.usernameToInvite,
    )
    return success_response(result)


@router.post("/{task_id}/accept")
async def accept_invite(
    task_id: str,
    user: Annotated[dict, Depends(require_auth)],
    task_service: Annotated[TaskService, Depends(get_task_service)],
):
    result = await pipelines.accept_invite_pipeline(
        task_service=task_service,
        task_id=task_id,
        user_id=str(user["_id"]),
    )
    return success_response(result)


@router.post("/{task_id}/reject")
async def reject_invite(
    task_id: str,
    user: Annotated[dict, Depends(require_auth)],
    task_service: Annotated[TaskService, Depends(get_task_service)],
):
    result = await pipelines.reject_invite_pipeline(
        task_service=task_service,
        task_id=task_id,
        user_id=str(user["_id"]),
    )
    return success_response(result)


@router.post("/{task_id}/request-join")
async def request_join(
    task_id: str,
    user: Annotated[dict, Depends(require_auth)],
    task_service: Annotated[TaskService, Depends(get_task_service)],
):
    result = await pipelines.request_join_pipeline(
        task_service=task_service,
        task_id=task_id,
        user_id=str(user["_id"]),
    )
    return success_response(result)


@router.post("/{task_id}/accept-collab")
async def accept_collaboration(
    task_id: str,
    body: AcceptCollabRequest,
    user: Annotated[dict, Depends(require_auth)],
    task_service: Annotated[TaskService, Depends(get_task_service)],
):
    result = await pipelines.accept_collab_pipeline(
        task_service=task_service,
        task_id=task_id,
        owner_id=str(user["_id"]),
        requester_id=body.userIdToAccept,
    )
    return success_response(result)
