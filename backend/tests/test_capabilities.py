"""Unit tests for the capability facade."""

import pytest
from pydantic import ValidationError

from access_policy.models.taxonomy import Action, Resource, Role
from access_policy.policy.capabilities import Capabilities
from access_policy.policy.evaluator import PolicyEvaluator, has_permission, set_policy_evaluator
from access_policy.policy.predicates import StaticVisibility
from access_policy.policy.registry import get_permissions_for_role
from access_policy.schemas.principal import Principal


def test_missing_principal_is_guest():
    caps = Capabilities()
    assert caps.roles == [Role.GUEST]
    assert caps.is_guest()
    assert not caps.is_authenticated()
    assert caps.can_read(Resource.DASHBOARD)
    assert not caps.can_create(Resource.PROJECT)


def test_principal_without_roles_has_no_access():
    caps = Capabilities(Principal(id="u1", roles=[]))
    assert caps.is_authenticated()
    assert not caps.can_read(Resource.DASHBOARD)
    assert not caps.can_access_route("/dashboard")


def test_role_queries():
    caps = Capabilities(Principal(id="u1", roles=[Role.USER, Role.MANAGER]))
    assert caps.is_(Role.USER)
    assert caps.is_("manager")
    assert not caps.is_admin()
    assert caps.is_manager() and caps.is_user() and not caps.is_guest()
    assert caps.is_any([Role.ADMIN, Role.MANAGER])
    assert not caps.is_any([Role.ADMIN, Role.GUEST])
    assert caps.is_all([Role.USER, Role.MANAGER])
    assert not caps.is_all([Role.USER, Role.ADMIN])
    assert caps.is_all([])


def test_is_owner_is_a_direct_id_check():
    caps = Capabilities(Principal(id="u1", roles=[Role.GUEST]))
    assert caps.is_owner("u1")
    assert not caps.is_owner("u2")
    assert not caps.is_owner(None)
    assert not Capabilities().is_owner("")


def test_action_sugar_matches_can():
    caps = Capabilities(Principal(id="u1", roles=[Role.MANAGER]))
    pairs = [
        (caps.can_create, Action.CREATE),
        (caps.can_read, Action.READ),
        (caps.can_update, Action.UPDATE),
        (caps.can_delete, Action.DELETE),
        (caps.can_manage, Action.MANAGE),
    ]
    for resource in Resource:
        for sugar, action in pairs:
            assert sugar(resource) == caps.can(resource, action)


def test_can_agrees_with_evaluator():
    caps = Capabilities(Principal(id="u1", roles=[Role.USER]))
    for resource in Resource:
        for action in Action:
            assert caps.can(resource, action) == has_permission(caps.context, resource, action)


def test_overrides_reach_conditions():
    caps = Capabilities(Principal(id="u1", roles=[Role.USER]))
    assert caps.can_update(Resource.TASK, data={"assignee": "u1"})
    assert not caps.can_update(Resource.TASK, data={"assignee": "u2"})
    assert caps.can_delete(Resource.TASK, resource_owner_id="u1", data={"status": "draft"})
    # the base context is untouched by overrides
    assert caps.context.data is None


def test_uses_installed_evaluator():
    caps = Capabilities()
    assert not caps.can_read(Resource.PROJECT, resource_id="p2")

    set_policy_evaluator(PolicyEvaluator(visibility=StaticVisibility({(Resource.PROJECT, "p2")})))
    assert caps.can_read(Resource.PROJECT, resource_id="p2")


def test_explicit_evaluator_wins():
    evaluator = PolicyEvaluator(visibility=StaticVisibility({(None, "r1")}))
    caps = Capabilities(evaluator=evaluator)
    assert caps.can_read(Resource.REPORT, resource_id="r1")
    assert not Capabilities().can_read(Resource.REPORT, resource_id="r1")


def test_listings():
    caps = Capabilities(Principal(id="u1", roles=[Role.GUEST]))
    assert caps.permissions() == list(get_permissions_for_role(Role.GUEST))
    assert "/dashboard" in caps.routes()
    assert "/budget" not in caps.routes()
    assert caps.can_access_route("/projects/7")


@pytest.mark.parametrize("overrides", [
    {"owner_id": "u1"},
    {"data": "x"},
    {"resource_owner_id": 7},
])
def test_bad_overrides_raise(overrides):
    caps = Capabilities(Principal(id="u1", roles=[Role.USER]))
    with pytest.raises(ValidationError):
        caps.can_delete(Resource.TASK, **overrides)
