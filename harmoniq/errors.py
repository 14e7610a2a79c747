"""
Harmoniq Safety - Error types

Domain functions raise these; main.py turns them into the
{"ok": False, "error": ...} envelope with the matching status code.
"""


class HarmoniqError(Exception):
    status_code = 400

    def __init__(self, message: str = "", status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def __str__(self):
        return self.message


class ValidationError(HarmoniqError):
    status_code = 400


class NotAuthenticated(HarmoniqError):
    status_code = 401

    def __init__(self, message: str = "Not logged in"):
        super().__init__(message)


class PermissionDenied(HarmoniqError):
    status_code = 403

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message)


class NotFound(HarmoniqError):
    status_code = 404

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class RenderError(HarmoniqError):
    status_code = 503
