# Authentication routes

import logging
from flask import Blueprint, jsonify
from flask_login import login_user, logout_user, current_user, login_required
from werkzeug.security import generate_password_hash, check_password_hash
from vinnu.extensions import db
from vinnu.errors import ValidationError, Conflict, Unauthorized, Forbidden
from vinnu.models import User
from vinnu.functions.serializers import user_summary, user_private
from vinnu.functions.tokens import issue_token
from vinnu.functions.validation import (
    validate_username, validate_email, validate_password, validate_name
)
from vinnu.routes.helpers import json_body, str_field

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


def _require(is_valid_msg, field):
    is_valid, msg = is_valid_msg
    if not is_valid:
        raise ValidationError(msg, field=field)


@auth_bp.route('/register', methods=['POST'])
def register():
    # Registration handler; accounts are active immediately
    data = json_body()
    first_name = str_field(data, 'firstName')
    last_name = str_field(data, 'lastName')
    username = str_field(data, 'username')
    email = str_field(data, 'email').lower()
    password = data.get('password') or ''

    _require(validate_name(first_name, 'first name'), 'firstName')
    _require(validate_name(last_name, 'last name'), 'lastName')
    _require(validate_username(username), 'username')
    _require(validate_email(email), 'email')
    _require(validate_password(password), 'password')

    username = username.lower()

    # Check if username or email already exists
    if User.query.filter_by(username=username).first():
        raise Conflict('Username already taken', field='username')
    if User.query.filter_by(email=email).first():
        raise Conflict('Email already registered', field='email')

    new_user = User(
        first_name=first_name,
        last_name=last_name,
        username=username,
        email=email,
        password=generate_password_hash(password, method='scrypt'),
        social_profiles={}
    )
    db.session.add(new_user)
    db.session.commit()

    logger.info(f"[REGISTER] created account {username}")
    return jsonify({
        'message': 'account created successfully',
        'user': user_summary(new_user)
    }), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    # Login with email or username
    data = json_body()
    identifier = data.get('email') or data.get('username')
    password = data.get('password') or ''

    user = User.by_login(identifier)
    if not user or not isinstance(password, str) or not check_password_hash(user.password, password):
        logger.info(f"[LOGIN] failed for {identifier!r}")
        raise Unauthorized('Invalid credentials')

    # Check if banned
    if user.is_banned:
        raise Forbidden(f'Account banned. Reason: {user.ban_reason or "Terms violation"}')

    login_user(user)
    logger.info(f"[LOGIN] {user.username} logged in")
    return jsonify({
        'token': issue_token(user),
        'user': {
            **user_summary(user),
            'email': user.email,
            'role': user.role
        }
    })


@auth_bp.route('/logout', methods=['POST'])
def logout():
    logout_user()
    return jsonify({'ok': True})


@auth_bp.route('/me')
@login_required
def me():
    return jsonify(user_private(current_user))
