"""
Collaborative task service.

Goals that can be private (invite only) or public (anyone may join),
with collaborators and pending invitations.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from common.utils.exceptions import BadRequestException, NotFoundException, ForbiddenException
from common.utils.serialization import to_object_id

logger = logging.getLogger(__name__)


PUBLIC_TASK_LIMIT = 10
USERNAME_FIELDS = {"username": 1}


class TaskService:
    """
    Task CRUD, membership changes and the dashboard query.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize TaskService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._tasks_collection = db["tasks"]
        self._users_collection = db["users"]

    # ─────────────────────────────────────────────────────────────────
    # Expansion
    # ─────────────────────────────────────────────────────────────────

    async def expand(self, tasks: List[dict]) -> List[dict]:
        """Replace owner, collaborator and invitee ids with {_id, username}."""
        ids = set()
        for task in tasks:
            ids.add(task.get("owner"))
            ids.update(task.get("collaborators") or [])
            ids.update(task.get("pendingInvitations") or [])
        ids.discard(None)

        users: Dict[Any, dict] = {}
        if ids:
            cursor = self._users_collection.find({"_id": {"$in": list(ids)}}, USERNAME_FIELDS)
            users = {u["_id"]: u for u in await cursor.to_list(length=len(ids))}

        def lookup(uid: Any) -> Any:
            return users.get(uid, uid)

        for task in tasks:
            task["owner"] = lookup(task.get("owner"))
            task["collaborators"] = [lookup(uid) for uid in task.get("collaborators") or []]
            task["pendingInvitations"] = [lookup(uid) for uid in task.get("pendingInvitations") or []]
        return tasks

    async def _expanded(self, task: dict) -> dict:
        return (await self.expand([task]))[0]

    # ─────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────

    async def _find(self, query: Dict[str, Any], limit: int = 500) -> List[dict]:
        cursor = self._tasks_collection.find(query).sort("createdAt", -1).limit(limit)
        return await cursor.to_list(length=limit)

    async def get_dashboard(self, user_id: str) -> Dict[str, List[dict]]:
        """
        Owned, collaborating, invited and discoverable public tasks.

        Owned private tasks are returned with pendingInvitations cleared;
        on public tasks those entries are join requests and are kept.
        """
        uid = ObjectId(user_id)

        owned, collaborating, invitations, public = await asyncio.gather(
            self._find({"owner": uid}),
            self._find({"collaborators": uid}),
            self._find({"pendingInvitations": uid, "owner": {"$ne": uid}}),
            self._find(
                {
                    "visibility": "public",
                    "owner": {"$ne": uid},
                    "collaborators": {"$nin": [uid]},
                    "pendingInvitations": {"$nin": [uid]},
                },
                limit=PUBLIC_TASK_LIMIT,
            ),
        )

        for task in owned:
            if task.get("visibility") == "private":
                task["pendingInvitations"] = []

        logger.debug(
            f"Dashboard for {user_id}: {len(owned)} owned, {len(collaborating)} collaborating, "
            f"{len(invitations)} invitations, {len(public)} public"
        )

        return {
            "ownedTasks": await self.expand(owned),
            "collaboratingTasks": await self.expand(collaborating),
            "invitations": await self.expand(invitations),
            "publicTasks": await self.expand(public),
        }

    async def get_task(self, task_id: str) -> dict:
        oid = to_object_id(task_id, "Task not found")
        task = await self._tasks_collection.find_one({"_id": oid})
        if not task:
            raise NotFoundException(message="Task not found", code="TASK_NOT_FOUND")
        return task

    # ─────────────────────────────────────────────────────────────────
    # Mutations
    # ─────────────────────────────────────────────────────────────────

    async def create_task(self, user_id: str, content: str, visibility: Optional[str] = None) -> dict:
        if not content or not content.strip():
            raise BadRequestException(message="Content field is required", code="TASK_CONTENT_REQUIRED")

        now = datetime.now(timezone.utc)
        doc = {
            "owner": ObjectId(user_id),
            "content": content,
            "visibility": visibility or "private",
            "isCompleted": False,
            "collaborators": [],
            "pendingInvitations": [],
            "createdAt": now,
            "updatedAt": now,
        }
        result = await self._tasks_collection.insert_one(doc)
        doc["_id"] = result.inserted_id

        logger.info(f"Task created: {result.inserted_id}")
        return doc

    async def update_task(
        self,
        task_id: str,
        user_id: str,
        content: Optional[str] = None,
        is_completed: Optional[bool] = None
    ) -> tuple:
        """
        Update content (owner only) and completion (owner or collaborator).

        Returns:
            (updated task, True if this call completed the task)

        Raises:
            NotFoundException: Unknown task
            ForbiddenException: Caller is neither owner nor collaborator
        """
        task = await self.get_task(task_id)
        uid = ObjectId(user_id)
        is_owner = task["owner"] == uid
        is_collaborator = uid in (task.get("collaborators") or [])

        if not is_owner and not is_collaborator:
            raise ForbiddenException(message="User not authorized to update this task", code="TASK_FORBIDDEN")

        set_fields: Dict[str, Any] = {"updatedAt": datetime.now(timezone.utc)}
        if is_owner and content:
            set_fields["content"] = content
        if is_completed is not None:
            set_fields["isCompleted"] = is_completed

        query: Dict[str, Any] = {"_id": task["_id"]}
        if is_completed:
            query["isCompleted"] = {"$ne": True}

        updated = await self._tasks_collection.find_one_and_update(
            query,
            {"$set": set_fields},
            return_document=ReturnDocument.AFTER
        )
        just_completed = bool(is_completed) and updated is not None

        if updated is None and is_completed:
            # Already completed, possibly by a concurrent request
            updated = await self._tasks_collection.find_one_and_update(
                {"_id": task["_id"]},
                {"$set": set_fields},
                return_document=ReturnDocument.AFTER
            )
        return updated, just_completed

    async def delete_task(self, task_id: str, user_id: str) -> None:
        task = await self.get_task(task_id)
        if str(task["owner"]) != str(user_id):
            raise ForbiddenException(message="User not authorized", code="TASK_FORBIDDEN")

        await self._tasks_collection.delete_one({"_id": task["_id"]})
        logger.info(f"Task deleted: {task['_id']}")

    async def invite(self, task_id: str, owner_id: str, invitee: Dict[str, Any]) -> dict:
        """
        Add a user to the task's pending invitations.

        Args:
            task_id: Task ID
            owner_id: Caller, must own the task
            invitee: User document of the person being invited

        Raises:
            ForbiddenException: Caller is not the owner
            BadRequestException: Invitee already involved
        """
        task = await self.get_task(task_id)
        if str(task["owner"]) != str(owner_id):
            raise ForbiddenException(message="Only the owner can invite.", code="TASK_FORBIDDEN")

        invitee_id = invitee["_id"]
        if (
            task["owner"] == invitee_id
            or invitee_id in (task.get("collaborators") or [])
            or invitee_id in (task.get("pendingInvitations") or [])
        ):
            raise BadRequestException(
                message="User is already involved with this task.",
                code="ALREADY_INVOLVED"
            )

        updated = await self._tasks_collection.find_one_and_update(
            {"_id": task["_id"]},
            {"$push": {"pendingInvitations": invitee_id}, "$set": {"updatedAt": datetime.now(timezone.utc)}},
            return_document=ReturnDocument.AFTER
        )
        logger.info(f"User {invitee.get('username')} invited to task {task['_id']}")
        return await self._expanded(updated)

    async def accept_invite(self, task_id: str, user_id: str) -> dict:
        task = await self.get_task(task_id)
        uid = ObjectId(user_id)
        if uid not in (task.get("pendingInvitations") or []):
            raise BadRequestException(message="No pending invitation found.", code="NO_INVITATION")

        return await self._move_to_collaborators(task["_id"], uid)

    async def reject_invite(self, task_id: str, user_id: str) -> None:
        task = await self.get_task(task_id)
        uid = ObjectId(user_id)
        if uid not in (task.get("pendingInvitations") or []):
            raise BadRequestException(message="No pending invitation found.", code="NO_INVITATION")

        await self._tasks_collection.update_one(
            {"_id": task["_id"]},
            {"$pull": {"pendingInvitations": uid}, "$set": {"updatedAt": datetime.now(timezone.utc)}}
        )

    async def join_public(self, task_id: str, user_id: str) -> dict:
        """
        Join a public task directly as a collaborator.

        Raises:
            BadRequestException: Task is private, or caller already involved
        """
        task = await self.get_task(task_id)
        uid = ObjectId(user_id)

        if task.get("visibility") != "public":
            raise BadRequestException(message="Can only join public tasks.", code="TASK_NOT_PUBLIC")

        if task["owner"] == uid or uid in (task.get("collaborators") or []):
            raise BadRequestException(
                message="You are already involved with this task.",
                code="ALREADY_INVOLVED"
            )

        updated = await self._tasks_collection.find_one_and_update(
            {"_id": task["_id"]},
            {"$addToSet": {"collaborators": uid}, "$set": {"updatedAt": datetime.now(timezone.utc)}},
            return_document=ReturnDocument.AFTER
        )
        return await self._expanded(updated)

    async def accept_collaboration_request(self, task_id: str, owner_id: str, requester_id: str) -> dict:
        """
        Owner moves a pending requester into collaborators.

        Raises:
            ForbiddenException: Caller is not the owner
            BadRequestException: No pending request from that user
        """
        task = await self.get_task(task_id)
        if str(task["owner"]) != str(owner_id):
            raise ForbiddenException(message="Not authorized to perform this action.", code="TASK_FORBIDDEN")

        pending = {str(uid): uid for uid in task.get("pendingInvitations") or []}
        if str(requester_id) not in pending:
            raise BadRequestException(message="No pending request from this user.", code="NO_REQUEST")

        return await self._move_to_collaborators(task["_id"], pending[str(requester_id)])

    async def _move_to_collaborators(self, task_oid: ObjectId, uid: ObjectId) -> dict:
        updated = await self._tasks_collection.find_one_and_update(
            {"_id": task_oid},
            {
                "$pull": {"pendingInvitations": uid},
                "$addToSet": {"collaborators": uid},
                "$set": {"updatedAt": datetime.now(timezone.utc)},
            },
            return_document=ReturnDocument.AFTER
        )
        logger.info(f"User {uid} added as collaborator on task {task_oid}")
        return await self._expanded(updated)
