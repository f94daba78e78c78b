"""
Error taxonomy for the RBAC backend.

Services raise these; the handlers registered by ``register_error_handlers``
turn them into the JSON envelope used by every route.
"""

import logging
from flask import jsonify

logger = logging.getLogger(__name__)


class RBACError(Exception):
    """Base exception carrying an HTTP status and a machine-readable code"""
    status_code = 400
    code = 'RBAC_ERROR'

    def __init__(self, message: str, status_code: int = None, code: str = None, errors: dict = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.errors = errors
        super().__init__(self.message)

    def to_dict(self):
        payload = {
            'success': False,
            'message': self.message,
            'code': self.code,
        }
        if self.errors:
            payload['errors'] = self.errors
        return payload


class UnauthenticatedError(RBACError):
    status_code = 401
    code = 'UNAUTHENTICATED'

    def __init__(self, message: str = 'Unauthenticated.'):
        super().__init__(message)


class BadCredentialError(RBACError):
    status_code = 401
    code = 'BAD_CREDENTIAL'

    def __init__(self, message: str = 'The provided credentials are incorrect.'):
        super().__init__(message, errors={'email': [message]})


class AccessDeniedError(RBACError):
    status_code = 403
    code = 'ACCESS_DENIED'


class MissingPermissionError(AccessDeniedError):
    code = 'MISSING_PERMISSION'

    def __init__(self, permission: str = None, message: str = None):
        self.permission = permission
        super().__init__(message or 'Access denied. Missing permission: %s' % permission)


class NotOwnerError(AccessDeniedError):
    code = 'NOT_OWNER'

    def __init__(self, message: str = 'Access denied.'):
        super().__init__(message)


class ValidationError(RBACError):
    status_code = 422
    code = 'VALIDATION_ERROR'

    def __init__(self, errors: dict, message: str = None):
        if message is None:
            first = next(iter(errors.values()), ['The given data was invalid.'])
            message = first[0] if first else 'The given data was invalid.'
        super().__init__(message, errors=errors)

    @classmethod
    def for_field(cls, field: str, message: str):
        return cls({field: [message]})


class ProtectedResourceError(RBACError):
    status_code = 422
    code = 'PROTECTED_RESOURCE'


class SelfDeletionError(RBACError):
    status_code = 422
    code = 'SELF_DELETION'

    def __init__(self, message: str = 'Cannot delete your own account.'):
        super().__init__(message)


class ResourceNotFoundError(RBACError):
    status_code = 404
    code = 'NOT_FOUND'


def register_error_handlers(app):
    @app.errorhandler(RBACError)
    def handle_rbac_error(error):
        if error.status_code >= 500:
            logger.error("%s: %s", error.code, error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({'success': False, 'message': 'Not found.', 'code': 'NOT_FOUND'}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return jsonify({'success': False, 'message': 'Method not allowed.', 'code': 'METHOD_NOT_ALLOWED'}), 405

    @app.errorhandler(413)
    def handle_too_large(error):
        return jsonify({'success': False, 'message': 'Payload too large.', 'code': 'PAYLOAD_TOO_LARGE'}), 413
