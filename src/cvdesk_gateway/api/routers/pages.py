"""
cvdesk_gateway.api.routers.pages

Page shells for the CV desk front-end.

Responsibilities:
- Serve one JSON view per page surface, after the authorization middleware has
  already allowed the navigation.
- Report the navigation menu and advisory affordances for the principal.

Page content (tasks, accounts, profiles) is rendered by the front-end.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from cvdesk_gateway.access.capabilities import Capability
from cvdesk_gateway.access.guard import AuthorizationGuard
from cvdesk_gateway.access.models import Principal
from cvdesk_gateway.api.deps import current_principal, guard_dep

router = APIRouter(tags=["pages"])

# (href, label key, capability or None)
NAV_ITEMS: tuple[tuple[str, str, Capability | None], ...] = (
    ("/dashboard", "dashboard", None),
    ("/tasks", "myTasks", None),
    ("/tasks/new", "newTask", Capability.edit_all),
    ("/all-tasks", "allTasks", Capability.view_all),
    ("/accounts", "accounts", Capability.view_accounts),
    ("/profile", "profile", None),
)


def navigation(guard: AuthorizationGuard, principal: Principal | None) -> list[dict[str, str]]:
    if principal is None:
        return []
    return [
        {"href": href, "label": label}
        for href, label, capability in NAV_ITEMS
        if capability is None or guard.principal_has_capability(principal, capability)
    ]


def _view(
    page: str,
    guard: AuthorizationGuard,
    principal: Principal | None,
    **extra: Any,
) -> dict[str, Any]:
    return {
        "page": page,
        "principal": None
        if principal is None
        else {
            "id": principal.id,
            "display_name": principal.display_name,
            "role": principal.role,
            "status": principal.status,
        },
        "navigation": navigation(guard, principal),
        **extra,
    }


@router.get("/")
@router.get("/dashboard")
async def dashboard(
    principal: Principal | None = Depends(current_principal),
    guard: AuthorizationGuard = Depends(guard_dep),
) -> dict[str, Any]:
    return _view(
        "dashboard",
        guard,
        principal,
        affordances={"new_task": guard.principal_has_capability(principal, Capability.edit_all)},
    )


@router.get("/tasks")
async def my_tasks(
    principal: Principal | None = Depends(current_principal),
    guard: AuthorizationGuard = Depends(guard_dep),
) -> dict[str, Any]:
    return _view("tasks", guard, principal)


@router.get("/tasks/new")
async def new_task(
    principal: Principal | None = Depends(current_principal),
    guard: AuthorizationGuard = Depends(guard_dep),
) -> dict[str, Any]:
    return _view("new_task", guard, principal)


@router.get("/tasks/{task_id}")
async def task_detail(
    task_id: str,
    principal: Principal | None = Depends(current_principal),
    guard: AuthorizationGuard = Depends(guard_dep),
) -> dict[str, Any]:
    return _view(
        "task_detail",
        guard,
        principal,
        task_id=task_id,
        affordances={"edit_any": guard.principal_has_capability(principal, Capability.edit_all)},
    )


@router.get("/all-tasks")
async def all_tasks(
    principal: Principal | None = Depends(current_principal),
    guard: AuthorizationGuard = Depends(guard_dep),
) -> dict[str, Any]:
    return _view(
        "all_tasks",
        guard,
        principal,
        affordances={"edit": guard.principal_has_capability(principal, Capability.edit_all)},
    )


@router.get("/accounts")
async def accounts(
    principal: Principal | None = Depends(current_principal),
    guard: AuthorizationGuard = Depends(guard_dep),
) -> dict[str, Any]:
    return _view(
        "accounts",
        guard,
        principal,
        affordances={
            "add_account": guard.principal_has_capability(principal, Capability.edit_all)
        },
    )


@router.get("/profile")
async def profile(
    principal: Principal | None = Depends(current_principal),
    guard: AuthorizationGuard = Depends(guard_dep),
) -> dict[str, Any]:
    return _view("profile", guard, principal)


@router.get("/login")
async def login(
    next_path: str | None = Query(default=None, alias="next"),
    principal: Principal | None = Depends(current_principal),
    guard: AuthorizationGuard = Depends(guard_dep),
) -> dict[str, Any]:
    return _view("login", guard, principal, return_to=next_path)


@router.get("/unauthorized")
async def unauthorized(
    principal: Principal | None = Depends(current_principal),
    guard: AuthorizationGuard = Depends(guard_dep),
) -> dict[str, Any]:
    return _view("unauthorized", guard, principal, back_to=guard.surfaces.landing_path)
