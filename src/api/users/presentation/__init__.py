"""Users presentation layer.

Routes are split by concern: `/auth` for the OAuth login flow and `/users`
for profile queries and mutations.
"""

from users.presentation.routes import auth_router, users_router

__all__ = ["auth_router", "users_router"]
