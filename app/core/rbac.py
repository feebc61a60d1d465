# app/core/rbac.py

from fastapi import Depends

from app.api.deps import get_current_principal
from app.core.identity import Principal, authorize
from app.core.visibility import Action, Resource, role_gate
from app.models.user import UserRole


def AllowRoles(*allowed_roles: UserRole):
    """
    Plain role gate. No admin bypass: admins are only let in where they are
    listed.
    """
    allowed = frozenset(allowed_roles)

    async def role_checker(principal: Principal = Depends(get_current_principal)):
        return authorize(principal, allowed)

    return role_checker


def Permit(resource: Resource, action: Action):
    """Role gate read from the access matrix for ``(resource, action)``."""

    async def permission_checker(principal: Principal = Depends(get_current_principal)):
        return role_gate(principal, resource, action)

    return permission_checker


require_admin = AllowRoles(UserRole.Admin)
require_faculty = AllowRoles(UserRole.Faculty)
require_student = AllowRoles(UserRole.Student)
