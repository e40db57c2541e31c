"""Error kinds shared by the service, the HTTP layer and the CLI.

Each kind carries the HTTP status it maps to; handlers in ``readaloud.app``
turn them into ``{"error": message}`` bodies.
"""


class ReadaloudError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ReadaloudError):
    status_code = 400


class NotFoundError(ReadaloudError):
    status_code = 404


class UpstreamError(ReadaloudError):
    status_code = 500


class StoreError(ReadaloudError):
    status_code = 500


class ConfigError(ReadaloudError):
    pass
