from __future__ import annotations

from app.records.models import LIST_VIEW, LOGIN_VIEW


class ViewerError(Exception):
    """Base for failures that end the triggering user action. Nothing is retried."""

    message = "Something went wrong."
    redirect: str | None = None

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message


class AuthRequired(ViewerError):
    message = "Authentication required."
    redirect = LOGIN_VIEW


class GatewayError(ViewerError):
    message = "Failed to load incidents. Please try again."


class IncidentNotFound(ViewerError):
    message = "Failed to load incident details. Redirecting back to list."
    redirect = LIST_VIEW


class MissingSelection(ViewerError):
    message = "No incident selected."
    redirect = LIST_VIEW


class MalformedContent(ViewerError):
    message = "Error loading timeline data."


class IntegrationUnavailable(ViewerError):
    message = "Tampermonkey is not detected. Please install the Tampermonkey userscript first."


class InvalidFilter(ViewerError):
    message = "Invalid search filter."


class NoIncidentLoaded(ViewerError):
    message = "No incident data available."
