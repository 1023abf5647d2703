from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

AUTH_PATH = "/auth"
HOME_PATH = "/"
NOT_FOUND_PATH = "/404"


@dataclass(frozen=True)
class Route:
    path: str
    label: str
    protected: bool = True
    in_nav: bool = True


ROUTES: Tuple[Route, ...] = (
    Route(HOME_PATH, "Dashboard"),
    Route("/workouts", "Workouts"),
    Route("/weight", "Weight"),
    Route("/water", "Water"),
    Route("/sleep", "Sleep"),
    Route("/goals", "Goals"),
    Route(AUTH_PATH, "Sign in", protected=False, in_nav=False),
    Route(NOT_FOUND_PATH, "Not found", protected=False, in_nav=False),
)

ROUTES_BY_PATH: Dict[str, Route] = {r.path: r for r in ROUTES}


def normalize_path(path: Optional[str]) -> str:
    """
    >>> normalize_path(None), normalize_path("workouts/"), normalize_path("/Goals")
    ('/', '/workouts', '/goals')
    """
    if not path:
        return HOME_PATH
    path = "/" + path.strip().strip("/").lower()
    return path


def resolve(path: Optional[str], signed_in: bool) -> str:
    """
    Map a requested path to the path that should actually render.

    Unknown paths go to the not-found page, protected paths need a signed-in
    identity, and a signed-in user asking for the auth page goes home.
    """
    path = normalize_path(path)
    route = ROUTES_BY_PATH.get(path)
    if route is None:
        return NOT_FOUND_PATH
    if route.protected and not signed_in:
        return AUTH_PATH
    if path == AUTH_PATH and signed_in:
        return HOME_PATH
    return path
