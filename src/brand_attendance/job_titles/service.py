from __future__ import annotations

from typing import Any, Optional, Sequence

from ..audit.model import ClientInfo
from ..audit.service import AuditService
from ..common.validators import as_flag, require_int
from ..core.enums import AuditAction
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import AuthUser
from .model import JobTitle
from .repository import JobTitleRepository


class JobTitleService:
    """Use case: the job title catalog; writes are limited to superusers and master groups."""

    def __init__(self, job_titles: JobTitleRepository, audit: AuditService):
        self._job_titles = job_titles
        self._audit = audit

    @staticmethod
    def _require_admin(actor: AuthUser) -> None:
        if not (actor.is_superuser or actor.is_master):
            raise AuthorizationError("Forbidden - Admin access required")

    def _require(self, job_title_id: Any) -> JobTitle:
        if job_title_id in (None, ""):
            raise ValidationError("Job title ID is required")
        job_title = self._job_titles.get_by_id(require_int(job_title_id, "Job title ID"))
        if not job_title:
            raise NotFoundError("Job title not found")
        return job_title

    def list_active(self) -> Sequence[JobTitle]:
        return self._job_titles.list_active()

    def get(self, job_title_id: Any) -> JobTitle:
        return self._require(job_title_id)

    def create(self, actor: AuthUser, data: dict, *, client: Optional[ClientInfo] = None) -> JobTitle:
        self._require_admin(actor)
        name = str(data.get("name") or "").strip()
        if not name:
            raise ValidationError("Name is required")
        if self._job_titles.get_by_name(name):
            raise ValidationError("A job title with this name already exists")

        job_title_id = self._job_titles.create(name=name, description=data.get("description") or None)
        job_title = self._job_titles.get_by_id(job_title_id)
        self._audit.log(
            user_id=actor.id,
            action=AuditAction.CREATE,
            table_name="job_titles",
            record_id=job_title_id,
            new_values=job_title.to_dict() if job_title else None,
            client=client,
        )
        return job_title

    def update(self, actor: AuthUser, data: dict, *, client: Optional[ClientInfo] = None) -> JobTitle:
        self._require_admin(actor)
        old = self._require(data.get("id"))

        fields: dict = {}
        if "name" in data:
            name = str(data.get("name") or "").strip()
            if not name:
                raise ValidationError("Name is required")
            other = self._job_titles.get_by_name(name)
            if other and other.id != old.id:
                raise ValidationError("A job title with this name already exists")
            fields["name"] = name
        if "description" in data:
            fields["description"] = data.get("description") or None
        if "is_active" in data:
            fields["is_active"] = as_flag(data["is_active"])
        if not fields:
            raise ValidationError("No fields to update")

        self._job_titles.update(old.id, fields)
        new = self._job_titles.get_by_id(old.id)
        self._audit.log(
            user_id=actor.id,
            action=AuditAction.UPDATE,
            table_name="job_titles",
            record_id=old.id,
            old_values=old.to_dict(),
            new_values=new.to_dict() if new else None,
            client=client,
        )
        return new

    def delete(self, actor: AuthUser, job_title_id: Any, *, client: Optional[ClientInfo] = None) -> None:
        self._require_admin(actor)
        old = self._require(job_title_id)
        self._job_titles.update(old.id, {"is_active": 0})
        self._audit.log(
            user_id=actor.id,
            action=AuditAction.DELETE,
            table_name="job_titles",
            record_id=old.id,
            old_values=old.to_dict(),
            client=client,
        )
