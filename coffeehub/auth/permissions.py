"""
Central registry of allowed actions per role.
"""
ROLE_SCOPES = {
    "customer": {"browse_catalog", "manage_cart", "place_order", "view_own_orders"},
    "admin":    {"*"},
}

ROLES = tuple(ROLE_SCOPES)


def role_has_scope(role: str, action: str) -> bool:
    scopes = ROLE_SCOPES.get(role, set())
    return "*" in scopes or action in scopes
