from typing import Optional

from cityat.schemas.auth import AuthSession, User
from cityat.schemas.common import CamelModel


class AuthState(CamelModel):
    is_authenticated: bool = False
    user: Optional[User] = None
    token: Optional[str] = None
    refresh_token: Optional[str] = None
    is_loading: bool = False
    error: Optional[str] = None
    # phone number an OTP was sent to, awaiting verification
    pending_phone: Optional[str] = None

    def login_start(self) -> None:
        self.is_loading = True
        self.error = None

    def login_success(self, session: AuthSession) -> None:
        self.is_authenticated = True
        self.user = session.user
        self.token = session.token
        self.refresh_token = session.refresh_token
        self.is_loading = False
        self.error = None
        self.pending_phone = None

    def login_failure(self, message: str) -> None:
        self.is_authenticated = False
        self.is_loading = False
        self.error = message

    def update_tokens(self, token: str, refresh_token: str) -> None:
        self.token = token
        self.refresh_token = refresh_token

    def update_user(self, user: User) -> None:
        self.user = user

    def logout(self) -> None:
        self.is_authenticated = False
        self.user = None
        self.token = None
        self.refresh_token = None
        self.is_loading = False
        self.error = None
        self.pending_phone = None
