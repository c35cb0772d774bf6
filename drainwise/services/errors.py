class ServiceError(Exception):
    status_code = 400

    def __init__(self, message, status_code=None, details=None, payload=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details
        # Extra fields merged into the JSON error body
        self.payload = payload or {}

    def to_dict(self):
        body = {'error': self.message}
        if self.details:
            body['details'] = self.details
        body.update(self.payload)
        return body


class ValidationError(ServiceError):
    """Malformed or missing input."""
    status_code = 400


class ConfirmationRequiredError(ServiceError):
    """A destructive operation was attempted without explicit user approval."""
    status_code = 400


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 409


class StorageError(ServiceError):
    status_code = 500
