"""Access-control vocabulary: roles, resources, actions and grant shapes."""

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from access_policy.models.conditions import Condition


class Role(str, enum.Enum):
    """Roles a dashboard principal can hold. A principal may hold several."""
    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"
    GUEST = "guest"


class Resource(str, enum.Enum):
    """Protected nouns of the dashboard."""
    PROJECT = "project"
    INVENTORY = "inventory"
    MATERIAL = "material"
    SUPPLIER = "supplier"
    TEAM = "team"
    TASK = "task"
    REPORT = "report"
    USER = "user"
    ROLE = "role"
    SETTING = "setting"
    NOTIFICATION = "notification"
    DASHBOARD = "dashboard"
    ANALYTICS = "analytics"
    CALENDAR = "calendar"
    DOCUMENT = "document"
    BUDGET = "budget"
    SCHEDULE = "schedule"
    FORECAST = "forecast"


class Action(str, enum.Enum):
    """Verbs attempted on a resource. MANAGE is the only wildcard."""
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    MANAGE = "manage"
    EXPORT = "export"
    IMPORT = "import"
    SHARE = "share"
    ASSIGN = "assign"
    APPROVE = "approve"
    REJECT = "reject"
    COMMENT = "comment"
    UPLOAD = "upload"
    DOWNLOAD = "download"
    PRINT = "print"
    VIEW = "view"
    LIST = "list"
    SEARCH = "search"


WILDCARD_ACTION = Action.MANAGE


def coerce_role(value: Any) -> Role | None:
    """Return the Role for ``value`` or None when it names no known role."""
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except (ValueError, TypeError):
        return None


# ── Grant rules ────────────────────────────────────
class Permission(BaseModel):
    """One grant rule. All conditions must hold for the rule to grant."""
    model_config = ConfigDict(frozen=True)

    resource: Resource
    action: Action
    conditions: tuple[Condition, ...] = ()

    def matches(self, resource: Any, action: Any) -> bool:
        return self.resource == resource and (
            self.action == action or self.action == WILDCARD_ACTION
        )


class RoleDefinition(BaseModel):
    """Registry entry for a role."""
    model_config = ConfigDict(frozen=True)

    name: Role
    display_name: str
    description: str
    permissions: tuple[Permission, ...] = ()


# ── Evaluation context ─────────────────────────────
class PermissionContext(BaseModel):
    """Per-query bundle of principal identity and the resource instance acted on.

    ``user_roles`` keeps names it does not recognise as plain strings so that
    evaluation can deny them instead of failing validation.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    user_id: str = ""
    user_roles: tuple[Role | str, ...] = ()
    resource_id: str | None = None
    resource_owner_id: str | None = None
    resource_type: Resource | str | None = None
    project_id: str | None = None
    team_id: str | None = None
    data: dict[str, Any] | None = Field(default=None, description="Payload attributes, e.g. status, assignee")

    @field_validator("user_roles", mode="before")
    @classmethod
    def _known_roles_as_enum(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, (str, Role)):
            value = [value]
        return tuple(coerce_role(v) or str(v) for v in value)

    @property
    def roles(self) -> list[Role]:
        """Held roles that exist in the vocabulary, in declaration order."""
        return [r for r in self.user_roles if isinstance(r, Role)]
