"""Condition variants attached to grant rules.

Each variant is a tagged pydantic model; ``Condition`` is the discriminated
union over all of them. Adding a variant means adding a model here, listing it
in ``CONDITION_TYPES`` and giving it a predicate in
``access_policy.policy.predicates``.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class _ConditionBase(BaseModel):
    model_config = ConfigDict(frozen=True)


class IsOwner(_ConditionBase):
    """Principal owns the resource instance."""
    kind: Literal["is_owner"] = "is_owner"


class IsTeamMember(_ConditionBase):
    """Principal belongs to the team in context."""
    kind: Literal["is_team_member"] = "is_team_member"


class IsProjectMember(_ConditionBase):
    """Principal belongs to the project in context."""
    kind: Literal["is_project_member"] = "is_project_member"


class IsPublic(_ConditionBase):
    """Resource instance is flagged public."""
    kind: Literal["is_public"] = "is_public"


class IsAssignee(_ConditionBase):
    """Payload names the principal as assignee."""
    kind: Literal["is_assignee"] = "is_assignee"


class StatusIn(_ConditionBase):
    """Payload status is one of ``statuses``."""
    kind: Literal["status_in"] = "status_in"
    statuses: frozenset[str]


CONDITION_TYPES = (IsOwner, IsTeamMember, IsProjectMember, IsPublic, IsAssignee, StatusIn)

Condition = Annotated[
    Union[IsOwner, IsTeamMember, IsProjectMember, IsPublic, IsAssignee, StatusIn],
    Field(discriminator="kind"),
]

# Shared instances for rule tables
IS_OWNER = IsOwner()
IS_TEAM_MEMBER = IsTeamMember()
IS_PROJECT_MEMBER = IsProjectMember()
IS_PUBLIC = IsPublic()
IS_ASSIGNEE = IsAssignee()


def status_in(*statuses: str) -> StatusIn:
    return StatusIn(statuses=frozenset(statuses))
