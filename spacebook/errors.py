"""
Reported outcomes of the booking engine.

Services raise these before touching the session, so a failed operation never
leaves a partial write behind. The API layer turns them into JSON responses
through the handler registered in ``create_app``.
"""


class ServiceError(ValueError):
    status_code = 400

    def __init__(self, message, **detail):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self):
        payload = {'message': self.message}
        payload.update(self.detail)
        return payload


class NotFoundError(ServiceError):
    status_code = 404


class InvalidInputError(ServiceError):
    status_code = 400


class ForbiddenError(ServiceError):
    status_code = 403


class ConflictError(ServiceError):
    status_code = 409
