"""Errors raised while handling a request, each mapped to the status of a synthetic response."""

from __future__ import annotations

from http import HTTPStatus


class HttpError(Exception):
    """Base of request-handling errors; answers with 500 unless a subclass says otherwise."""

    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    description = "HTTP error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(self.description if message is None else message)


class _DetailedHttpError(HttpError):
    template = "{}"

    def __init__(self, detail: object) -> None:
        self.detail = str(detail)
        super().__init__(self.template.format(self.detail))


class InvalidHostInRequestHeader(HttpError):
    status = HTTPStatus.BAD_REQUEST
    description = "Invalid host in request header"


class SniHostInconsistency(HttpError):
    status = HTTPStatus.MISDIRECTED_REQUEST
    description = "SNI and Host header mismatch"


class NoMatchingBackendApp(HttpError):
    status = HTTPStatus.SERVICE_UNAVAILABLE
    description = "No matching backend app"


class FailedToRedirect(_DetailedHttpError):
    template = "Failed to redirect: {}"


class NoUpstreamCandidates(HttpError):
    status = HTTPStatus.NOT_FOUND
    description = "No upstream candidates"


class FailedToGenerateUpstreamRequest(_DetailedHttpError):
    template = "Failed to generate upstream request for backend application: {}"


class FailedToGetResponseFromBackend(_DetailedHttpError):
    template = "Failed to get response from backend: {}"


class FailedToAddSetCookieInResponse(_DetailedHttpError):
    template = "Failed to add set-cookie header in response {}"


class FailedToGenerateDownstreamResponse(_DetailedHttpError):
    template = "Failed to generated downstream response for clients: {}"


class FailedToUpgrade(_DetailedHttpError):
    template = "Failed to upgrade connection: {}"


def status_code_for(error: BaseException) -> HTTPStatus:
    """Status code of the synthetic response that answers ``error``."""
    if isinstance(error, HttpError):
        return error.status
    return HTTPStatus.INTERNAL_SERVER_ERROR