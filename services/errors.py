class ValidationError(ValueError):
    """Missing or malformed request input (400)."""


class NotFound(LookupError):
    """A referenced course, coupon or registration does not exist (404)."""


class UpstreamError(RuntimeError):
    """Database, payment gateway or mail relay failure (500)."""
