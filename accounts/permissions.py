from rest_framework.permissions import BasePermission

from accounts.models import User


class RolePermission(BasePermission):
    """
    Grants access to authenticated users whose ``role`` is in ``roles``.
    Object-level rules (own requests, assigned work) are enforced by the
    services and by role-scoped querysets.
    """
    roles = ()

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user
            and user.is_authenticated
            and getattr(user, "role", None) in self.roles
        )


class IsResident(RolePermission):
    roles = (User.RESIDENT,)
    message = "Access restricted to resident accounts only."


class IsCollector(RolePermission):
    roles = (User.COLLECTOR,)
    message = "Access restricted to garbage collector accounts only."


class IsAdmin(RolePermission):
    roles = (User.ADMIN,)
    message = "Access restricted to administrator accounts only."


class IsCollectorOrAdmin(RolePermission):
    roles = (User.COLLECTOR, User.ADMIN)
    message = "Access restricted to collectors and administrators."


class IsResidentOrAdmin(RolePermission):
    roles = (User.RESIDENT, User.ADMIN)
    message = "Access restricted to residents and administrators."
