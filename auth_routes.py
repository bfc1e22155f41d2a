from flask import Blueprint, request, jsonify
from werkzeug.security import generate_password_hash

from errors import UniquenessConflict
from storage import get_storage
from utils import logger
from validation import UserCreate, validate_data

auth_bp = Blueprint('auth_bp', __name__)


def public_user(user):
    user = dict(user)
    user.pop('password', None)
    return user


@auth_bp.route('/auth/register', methods=['POST'])
def register():
    data = validate_data(UserCreate, request.get_json(silent=True))
    storage = get_storage()

    if storage.get_user_by_username(data['username']):
        raise UniquenessConflict("Username already exists")

    if storage.get_user_by_email(data['email']):
        raise UniquenessConflict("Email already exists")

    data['password'] = generate_password_hash(data['password'])
    user = storage.create_user(**data)
    logger.info(f"Registered user {user['id']} ({user['username']})")
    return jsonify(public_user(user)), 201


@auth_bp.route('/users/<int:user_id>', methods=['GET'])
def get_user(user_id):
    user = get_storage().get_user(user_id)
    if not user:
        return jsonify({"message": "User not found"}), 404
    return jsonify(public_user(user))
