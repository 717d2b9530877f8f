# Error kinds shared by the relationship engine, playlist CRUD and routes
# Every kind maps to an HTTP status; the app-level handler renders them as {'error': ...}


class VinnuError(Exception):
    status_code = 400
    default_message = 'Bad request'

    def __init__(self, message=None, field=None):
        self.message = message or self.default_message
        self.field = field
        super().__init__(self.message)

    def to_dict(self):
        payload = {'error': self.message}
        if self.field:
            payload['field'] = self.field
        return payload


class ValidationError(VinnuError):
    status_code = 400
    default_message = 'Invalid input'


class InvalidOperation(VinnuError):
    status_code = 400
    default_message = 'Invalid operation'


class NotFound(VinnuError):
    status_code = 404
    default_message = 'Not found'


class Conflict(VinnuError):
    status_code = 409
    default_message = 'Already exists'


class Forbidden(VinnuError):
    status_code = 403
    default_message = 'Forbidden'


class Unauthorized(VinnuError):
    status_code = 401
    default_message = 'Unauthorized'


# Relationship conflicts are reported as plain 400s to API clients
class AlreadyFriends(Conflict):
    status_code = 400
    default_message = 'Already friends'


class RequestAlreadySent(Conflict):
    status_code = 400
    default_message = 'Friend request already sent'


class NoPendingRequest(InvalidOperation):
    default_message = 'No friend request from this user'


class NotFriends(InvalidOperation):
    default_message = 'Not friends with this user'
