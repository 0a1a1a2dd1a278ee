"""Client-side route table."""

from dataclasses import dataclass
from typing import Literal, Optional

from use_cases.session_models import Session

RouteName = Literal["login", "register", "dashboard", "not_found"]

HOME_PATH = "/"
LOGIN_PATH = "/login"
REGISTER_PATH = "/register"
DASHBOARD_PATH = "/dashboard"

ROUTES = {
    HOME_PATH: "login",
    LOGIN_PATH: "login",
    REGISTER_PATH: "register",
    DASHBOARD_PATH: "dashboard",
}

PROTECTED_ROUTES = {"dashboard"}
PUBLIC_AUTH_ROUTES = {"login", "register"}


@dataclass(frozen=True)
class ResolvedRoute:
    name: RouteName
    path: str

    @property
    def is_protected(self) -> bool:
        return self.name in PROTECTED_ROUTES


def normalize_path(path: Optional[str]) -> str:
    if not path:
        return HOME_PATH
    path = "/" + path.strip().strip("/")
    return path


def resolve_route(path: Optional[str]) -> ResolvedRoute:
    path = normalize_path(path)
    return ResolvedRoute(name=ROUTES.get(path, "not_found"), path=path)


def public_page_redirect(route: ResolvedRoute, session: Session) -> Optional[str]:
    """Login and register pages send an already signed-in user to the dashboard."""
    if route.name in PUBLIC_AUTH_ROUTES and not session.loading and session.is_authenticated:
        return DASHBOARD_PATH
    return None
