"""Error taxonomy shared by the core and the HTTP layer."""


class QrisError(Exception):
    """Base class; carries the HTTP status the error maps to."""

    status_code = 400
    code = "qris_error"
    default_message = "QRIS request failed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {'error': self.message, 'code': self.code, 'success': False}


class MissingInput(QrisError):
    code = "missing_input"
    default_message = "Required input is missing"


class InvalidAmount(QrisError):
    code = "invalid_amount"
    default_message = "Invalid amount"


class MalformedPayload(QrisError):
    code = "malformed_payload"
    default_message = "Malformed QRIS payload"


class ValueTooLong(QrisError):
    code = "value_too_long"
    default_message = "Field value exceeds 99 characters"


class NotFoundOrExpired(QrisError):
    # one message for unknown and expired ids alike
    status_code = 404
    code = "not_found"
    default_message = "Artifact not found or expired"


class RenderError(QrisError):
    status_code = 500
    code = "render_error"
    default_message = "Failed to render QR image"
