"""
Role checks shared by the role gate dependency and the service layer.
"""

from househunt.models.user import User, UserRole
from househunt.utils.exceptions import InsufficientRoleError


def ensure_role(user: User, required_role: UserRole) -> User:
    """
    Require that an already-resolved user holds a role.

    Args:
        user: Identity attached by the access gate
        required_role: Role the operation is restricted to

    Returns:
        The same user, unchanged

    Raises:
        InsufficientRoleError: If the user's role differs
    """
    if UserRole(user.role) != required_role:
        raise InsufficientRoleError(required_role.value)
    return user
