# Shared request helpers for route handlers

from functools import wraps
from flask import request, current_app
from flask_login import current_user, login_required
from vinnu.errors import ValidationError, Forbidden, NotFound
from vinnu.models import User


def json_body():
    # Parsed JSON object body; anything else is a validation error
    if not request.data:
        return {}
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('request body must be a JSON object')
    return data


def str_field(data, key, default=''):
    # Stripped string field from a JSON body; missing or null reads as default
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValidationError(f'{key} must be a string', field=key)
    return value.strip()


def user_or_404(username):
    user = User.by_username(username)
    if user is None:
        raise NotFound('User not found')
    return user


def notifier():
    return current_app.extensions.get('vinnu_notifier')


def roles_required(*roles):
    # Like login_required, plus a role check on the authenticated account
    def decorator(view):
        @wraps(view)
        @login_required
        def wrapped(*args, **kwargs):
            if current_user.role not in roles:
                raise Forbidden('Access denied. Insufficient role.')
            return view(*args, **kwargs)
        return wrapped
    return decorator


admin_required = roles_required('admin', 'superadmin')
superadmin_required = roles_required('superadmin')
