from django.contrib.auth import get_user_model

from pricing.exceptions import NotFound, Unauthorized

User = get_user_model()


def ensure_role(actor, *roles, action="perform this action"):
    """
    Raise Unauthorized unless ``actor`` is an active user holding one of ``roles``.
    """
    if actor is None or not getattr(actor, "is_authenticated", False):
        raise Unauthorized(f"Authentication is required to {action}.")
    if not actor.is_active:
        raise Unauthorized(f"Account {actor.username} is inactive and cannot {action}.")
    if actor.role not in roles:
        allowed = " or ".join(roles)
        raise Unauthorized(f"Only {allowed} accounts can {action}.")


def get_actor(user_id, role):
    """
    Resolve ``user_id`` to an active user with ``role`` or raise NotFound.
    Accepts either a primary key or a User instance.
    """
    if isinstance(user_id, User):
        user_id = user_id.pk
    try:
        return User.objects.get(pk=user_id, role=role, is_active=True)
    except (User.DoesNotExist, ValueError, TypeError):
        label = dict(User.ROLE_CHOICES).get(role, role)
        raise NotFound(f"{label} #{user_id} does not exist.")


def get_collector(collector_id):
    return get_actor(collector_id, User.COLLECTOR)


def get_resident(resident_id):
    return get_actor(resident_id, User.RESIDENT)
