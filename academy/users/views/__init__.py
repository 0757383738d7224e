"""
Academy Users Views Package

Views for authentication, self service and user administration.

Features:
- Cookie based JWT authentication (register, login, refresh, logout)
- Password reset by emailed code
- Self service account and password update
- Admin user listing, deletion and statistics
"""

from .auth_views import (
    ForgotPasswordView,
    LoginView,
    LogoutView,
    RefreshTokenView,
    RegisterView,
    ResetPasswordView,
)
from .user_crud_view import UserAdminViewSet
from .user_self_info import ChangePasswordView, CurrentUserView
