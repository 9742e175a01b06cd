from typing import List

from fastapi import APIRouter, Depends, HTTPException

from taskberry.models.user import Role
from taskberry.schemas.hierarchy import HierarchyIssue, RoleInfo, TeamHierarchy
from taskberry.schemas.user import UserSnapshot
from taskberry.utils.auth import get_actor, get_directory, get_super_admin
from taskberry.utils.directory import Directory
from taskberry.utils.hierarchy import HierarchyManager, role_catalogue

router = APIRouter()


# 1. Roles, most junior first, with the links each one requires
@router.get("/roles", response_model=List[RoleInfo])
def get_roles(actor: UserSnapshot = Depends(get_actor)):
    return role_catalogue()


# 2. Manager -> supervisors -> members
@router.get("/structure", response_model=List[TeamHierarchy])
def get_structure(
    directory: Directory = Depends(get_directory),
    actor: UserSnapshot = Depends(get_actor),
):
    if actor.role == Role.super_admin:
        managers = directory.list_by_role(Role.manager)
    elif actor.role == Role.manager:
        managers = [actor]
    else:
        raise HTTPException(status_code=403, detail="Only managers and super admins can view the team structure")

    manager = HierarchyManager(directory)
    return [manager.get_team_hierarchy(m) for m in managers]


# 3. Users whose stored role or links are no longer valid
@router.get("/diagnostics", response_model=List[HierarchyIssue])
def get_diagnostics(
    directory: Directory = Depends(get_directory),
    actor: UserSnapshot = Depends(get_super_admin),
):
    return HierarchyManager(directory).diagnose()
