"""Governance error types and their JSON rendering.

Every error raised by the governance store derives from ``GovernanceError``
and carries the HTTP status the API answers with, so routes can let them
propagate and rely on the handler registered here.
"""

from typing import Any, Dict, Optional


class GovernanceError(Exception):
    """Base class for rejected governance operations."""

    status_code = 400

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def __str__(self):
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class ValidationError(GovernanceError):
    """Malformed or missing input fields."""


class OrganizationNotFound(GovernanceError):
    status_code = 404


class ProposalNotFound(GovernanceError):
    status_code = 404


class PermissionDenied(GovernanceError):
    """The acting address may not perform this change."""

    status_code = 403


class InvalidChoice(ValidationError):
    """A ballot names options the proposal does not have, or has the wrong shape."""


class VotingClosed(GovernanceError):
    status_code = 409


class AlreadyVoted(GovernanceError):
    status_code = 409


def register_error_handlers(app):
    @app.errorhandler(GovernanceError)
    def handle_governance_error(error):
        app.logger.warning("Rejected request: %s", error)
        return {"ok": False, "error": error.message}, error.status_code
