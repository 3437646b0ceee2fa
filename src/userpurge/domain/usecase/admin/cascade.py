"""Cascading removal of a user and every record that references them."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Mapping, Sequence, TypeVar

from userpurge.domain.models.UserModel import USERS_COLLECTION, User
from userpurge.domain.usecase._shared import bounded_gather, fan_out
from userpurge.domain.usecase.errors import ErrorKind, OperationError
from userpurge.domain.usecase.ports import (
    DocumentStore,
    IdentityNotFoundError,
    IdentityStore,
    StoredDocument,
)

log = logging.getLogger(__name__)

T = TypeVar("T")

BACKREF_FIELD = "userId"
GROUPS_COLLECTION = "groups"
GROUP_MEMBERS_FIELD = "members"


@dataclass(frozen=True, slots=True)
class Sweep:
    collection: str
    audit_key: str


DEPENDENT_SWEEPS: tuple[Sweep, ...] = (
    Sweep("posts", "postsDeleted"),
    Sweep("comments", "commentsDeleted"),
    Sweep("groupPosts", "groupPostsDeleted"),
    Sweep("likes", "likesDeleted"),
    Sweep("notifications", "notificationsDeleted"),
    Sweep("messages", "messagesDeleted"),
    Sweep("userStatus", "statusUpdatesDeleted"),
    Sweep("friends", "friendRelationshipsDeleted"),
    Sweep("friendRequests", "friendRequestsDeleted"),
)


class IdentityOutcome(str, Enum):
    DELETED = "deleted"
    ABSENT = "absent"
    FAILED = "failed"


@dataclass(slots=True)
class CascadeReport:
    target: User
    deleted: dict[str, int] = field(default_factory=dict)
    groups_pruned: int = 0
    identity: IdentityOutcome = IdentityOutcome.DELETED
    warnings: list[str] = field(default_factory=list)

    def audit_details(self) -> dict[str, object]:
        details: dict[str, object] = {
            sweep.audit_key: self.deleted.get(sweep.collection, 0)
            for sweep in DEPENDENT_SWEEPS
        }
        details["groupsRemovedFrom"] = self.groups_pruned
        details["identityRecord"] = self.identity.value
        return details


class CascadeError(Exception):
    """A cascade step failed after mutations may already have committed."""

    def __init__(
        self,
        message: str,
        *,
        step: str,
        completed: Mapping[str, int] | None = None,
        failed: Mapping[str, str] | None = None,
        cancelled: Sequence[str] = (),
    ) -> None:
        super().__init__(message)
        self.step = step
        self.completed = dict(completed or {})
        self.failed = dict(failed or {})
        self.cancelled = list(cancelled)

    def details(self) -> dict[str, object]:
        return {
            "step": self.step,
            "completed": self.completed,
            "failed": self.failed,
            "cancelled": self.cancelled,
        }


@dataclass(slots=True)
class CascadeDeleteUser:
    store: DocumentStore
    identity: IdentityStore
    max_concurrent_writes: int = 10

    async def execute(self, user_id: str) -> CascadeReport:
        target_doc = await self.store.get(USERS_COLLECTION, user_id)
        if target_doc is None:
            raise OperationError(ErrorKind.NOT_FOUND, "User not found.")
        report = CascadeReport(target=User.from_document(target_doc))

        report.deleted = await self._run_sweeps(user_id)
        report.groups_pruned = await self._step(
            "groups", self._prune_group_memberships(user_id)
        )
        log.info(
            "Removed user from groups",
            extra={"user_id": user_id, "groups": report.groups_pruned},
        )

        await self._step("user", self.store.delete(USERS_COLLECTION, user_id))
        log.info("Deleted user document", extra={"user_id": user_id})

        await self._delete_identity(user_id, report)
        return report

    async def _step(self, name: str, awaitable: Awaitable[T]) -> T:
        try:
            return await awaitable
        except Exception as exc:
            raise CascadeError(str(exc), step=name) from exc

    async def _run_sweeps(self, user_id: str) -> dict[str, int]:
        jobs = {
            sweep.collection: (lambda coll=sweep.collection: self._sweep(coll, user_id))
            for sweep in DEPENDENT_SWEEPS
        }
        outcome = await fan_out(jobs)
        if outcome.failed:
            failed = {name: str(exc) for name, exc in outcome.failed.items()}
            log.error(
                "Sweep failure aborted cascade",
                extra={
                    "user_id": user_id,
                    "completed": outcome.completed,
                    "failed": failed,
                    "cancelled": outcome.cancelled,
                },
            )
            raise CascadeError(
                str(outcome.first_error()),
                step="sweeps",
                completed=outcome.completed,
                failed=failed,
                cancelled=outcome.cancelled,
            ) from outcome.first_error()
        return outcome.completed

    async def _sweep(self, collection: str, user_id: str) -> int:
        matches = await self.store.query(collection, BACKREF_FIELD, user_id)
        removed = await bounded_gather(
            (
                (lambda key=doc.key: self.store.delete(collection, key))
                for doc in matches
            ),
            limit=self.max_concurrent_writes,
        )
        count = sum(1 for ok in removed if ok)
        log.info(
            "Swept %s", collection, extra={"user_id": user_id, "deleted": count}
        )
        return count

    async def _prune_group_memberships(self, user_id: str) -> int:
        # Membership is not indexed by member, so every group is read.
        groups = await self.store.scan(GROUPS_COLLECTION, fields=[GROUP_MEMBERS_FIELD])
        affected = [group for group in groups if _has_member(group, user_id)]
        updated = await bounded_gather(
            (
                (
                    lambda group=group: self.store.update(
                        GROUPS_COLLECTION,
                        group.key,
                        {GROUP_MEMBERS_FIELD: _without_member(group, user_id)},
                    )
                )
                for group in affected
            ),
            limit=self.max_concurrent_writes,
        )
        # A group removed after the scan does not count.
        return sum(1 for ok in updated if ok)

    async def _delete_identity(self, user_id: str, report: CascadeReport) -> None:
        try:
            await self.identity.delete_user(user_id)
        except IdentityNotFoundError:
            report.identity = IdentityOutcome.ABSENT
            log.info("Identity record already absent", extra={"user_id": user_id})
        except Exception as exc:
            report.identity = IdentityOutcome.FAILED
            report.warnings.append(f"Identity record not deleted: {exc}")
            log.warning(
                "Error deleting identity record: %s", exc, extra={"user_id": user_id}
            )
        else:
            report.identity = IdentityOutcome.DELETED
            log.info("Deleted identity record", extra={"user_id": user_id})


def _members(group: StoredDocument) -> list[object]:
    members = group.get(GROUP_MEMBERS_FIELD)
    if not isinstance(members, (list, tuple, set)):
        return []
    return list(members)


def _has_member(group: StoredDocument, user_id: str) -> bool:
    return user_id in _members(group)


def _without_member(group: StoredDocument, user_id: str) -> list[object]:
    return [member for member in _members(group) if member != user_id]
