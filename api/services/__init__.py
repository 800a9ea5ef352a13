"""
API Services Layer.

Database and storage operations behind the API endpoints. Every function
takes the request's session explicitly.
"""

from api.services.admins import (
    count_admins,
    create_admin,
    list_admins,
    get_admin,
    update_admin,
    toggle_admin_status,
    authenticate_admin,
)

from api.services.positions import (
    get_active_position,
    list_positions,
    create_position,
    update_position,
    delete_position,
)

from api.services.applications import (
    submit_application,
    list_applications,
    get_application,
)

from api.services.candidates import (
    list_candidates,
    get_candidate,
)

__all__ = [
    # Admins
    "count_admins",
    "create_admin",
    "list_admins",
    "get_admin",
    "update_admin",
    "toggle_admin_status",
    "authenticate_admin",
    # Positions
    "get_active_position",
    "list_positions",
    "create_position",
    "update_position",
    "delete_position",
    # Applications
    "submit_application",
    "list_applications",
    "get_application",
    # Candidates
    "list_candidates",
    "get_candidate",
]
