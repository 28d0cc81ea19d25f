"""Unit tests for the awaitable evaluator."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from access_policy.models.taxonomy import Action, PermissionContext, Resource, Role
from access_policy.policy.evaluator import (
    AsyncPolicyEvaluator,
    Decision,
    PolicyEvaluator,
    create_permission_context,
)
from access_policy.policy.predicates import StaticMembership, StaticVisibility


class AsyncMembership:
    def __init__(self, projects):
        self.projects = projects
        self.calls = 0

    async def is_team_member(self, user_id, team_id):
        self.calls += 1
        await asyncio.sleep(0)
        return False

    async def is_project_member(self, user_id, project_id):
        self.calls += 1
        await asyncio.sleep(0)
        return user_id in self.projects.get(project_id, set())


class AsyncVisibility:
    async def is_public(self, resource_type, resource_id):
        await asyncio.sleep(0)
        return resource_id == "p2"


class TimingOutVisibility:
    async def is_public(self, resource_type, resource_id):
        raise asyncio.TimeoutError()


@pytest.mark.asyncio
async def test_async_admin_and_empty_roles():
    evaluator = AsyncPolicyEvaluator()
    assert await evaluator.has_permission(create_permission_context("u1", [Role.ADMIN]), "x", "y") is True
    assert await evaluator.has_permission(create_permission_context("u1", []), Resource.TASK, Action.READ) is False


@pytest.mark.asyncio
async def test_async_membership_lookup_awaited():
    membership = AsyncMembership({"p1": {"u1"}})
    evaluator = AsyncPolicyEvaluator(membership=membership)

    member = create_permission_context("u1", [Role.USER], project_id="p1")
    outsider = create_permission_context("u9", [Role.USER], project_id="p1")

    assert await evaluator.has_permission(member, Resource.DOCUMENT, Action.UPLOAD) is True
    assert await evaluator.has_permission(outsider, Resource.DOCUMENT, Action.UPLOAD) is False
    assert membership.calls == 2


@pytest.mark.asyncio
async def test_async_guest_public_project():
    evaluator = AsyncPolicyEvaluator(visibility=AsyncVisibility())
    private = PermissionContext(user_roles=["guest"], resource_id="p1")
    public = PermissionContext(user_roles=["guest"], resource_id="p2")

    assert await evaluator.has_permission(private, Resource.PROJECT, Action.READ) is False
    assert await evaluator.has_permission(public, Resource.PROJECT, Action.READ) is True


@pytest.mark.asyncio
async def test_async_lookup_failure_denies():
    evaluator = AsyncPolicyEvaluator(visibility=TimingOutVisibility())
    ctx = PermissionContext(user_roles=["guest"], resource_id="p2")

    explanation = await evaluator.explain_permission(ctx, Resource.PROJECT, Action.READ)
    assert explanation.allowed is False
    assert explanation.decision == Decision.CONDITIONS_FAILED
    assert explanation.failed_conditions == ["is_public"]


@pytest.mark.asyncio
async def test_async_accepts_plain_providers():
    evaluator = AsyncPolicyEvaluator(membership=StaticMembership(teams={}, projects={"p1": {"u1"}}))
    ctx = create_permission_context("u1", [Role.USER], project_id="p1")
    assert await evaluator.has_permission(ctx, Resource.MATERIAL, Action.UPDATE) is True


@pytest.mark.asyncio
async def test_async_matches_sync_decisions():
    membership = StaticMembership(projects={"p1": {"u1"}})
    visibility = StaticVisibility({(Resource.PROJECT, "p1")})
    sync_eval = PolicyEvaluator(membership=membership, visibility=visibility)
    async_eval = AsyncPolicyEvaluator(membership=membership, visibility=visibility)

    for roles in ([Role.GUEST], [Role.USER], [Role.MANAGER], [Role.USER, Role.GUEST]):
        ctx = create_permission_context(
            "u1", roles, project_id="p1", resource_id="p1",
            resource_owner_id="u1", data={"status": "pending", "assignee": "u1"},
        )
        for resource in Resource:
            for action in Action:
                expected = sync_eval.has_permission(ctx, resource, action)
                assert await async_eval.has_permission(ctx, resource, action) == expected


@pytest.mark.asyncio
async def test_async_lookup_receives_context_ids():
    membership = MagicMock()
    membership.is_team_member = AsyncMock(return_value=False)
    membership.is_project_member = AsyncMock(return_value=True)
    evaluator = AsyncPolicyEvaluator(membership=membership)

    ctx = create_permission_context("u1", [Role.USER], project_id="prj-7")
    assert await evaluator.has_permission(ctx, Resource.TASK, Action.COMMENT) is True
    membership.is_project_member.assert_awaited_once_with("u1", "prj-7")
    membership.is_team_member.assert_not_awaited()


@pytest.mark.asyncio
async def test_async_lookup_skipped_without_project():
    membership = MagicMock()
    membership.is_project_member = AsyncMock(return_value=True)
    evaluator = AsyncPolicyEvaluator(membership=membership)

    ctx = create_permission_context("u1", [Role.USER])
    assert await evaluator.has_permission(ctx, Resource.TASK, Action.COMMENT) is False
    membership.is_project_member.assert_not_awaited()


@pytest.mark.asyncio
async def test_unconditional_grant_needs_no_lookup():
    visibility = MagicMock()
    visibility.is_public = AsyncMock(return_value=True)
    evaluator = AsyncPolicyEvaluator(visibility=visibility)

    ctx = create_permission_context("u1", [Role.USER], resource_id="p1")
    assert await evaluator.has_permission(ctx, Resource.PROJECT, Action.READ) is True
    visibility.is_public.assert_not_awaited()
