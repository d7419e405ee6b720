"""Decision feature: request schemas, auth seam, and API router."""

from .auth import AllowAllVerifier, AuthError, StaticTokenVerifier, TokenVerifier, verifier_from_settings
from .router import create_decision_router, install_error_handlers, user_dependency
from .schemas import ActionProbabilityPayload, DecideRequest, DecisionPayload

__all__ = [
    "ActionProbabilityPayload",
    "AllowAllVerifier",
    "AuthError",
    "DecideRequest",
    "DecisionPayload",
    "StaticTokenVerifier",
    "TokenVerifier",
    "create_decision_router",
    "install_error_handlers",
    "user_dependency",
    "verifier_from_settings",
]
