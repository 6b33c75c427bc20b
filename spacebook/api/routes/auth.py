from flask import Blueprint, jsonify
from spacebook.services.auth_service import AuthService
from spacebook.services.user_service import UserService
from spacebook.utils.decorators import token_required
from spacebook.utils.http import json_object

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/register', methods=['POST'])
def register():
    data = json_object()
    user = UserService.register(data)
    token = AuthService.issue_token(user)
    return jsonify({
        'message': 'User registered successfully',
        'token': token,
        'user': user.to_dict()
    }), 201


@auth_bp.route('/auth/login', methods=['POST'])
def login():
    data = json_object()
    user = UserService.authenticate(data.get('email'), data.get('password'))
    if not user:
        return jsonify({'message': 'Invalid credentials'}), 401

    token = AuthService.issue_token(user)
    return jsonify({'token': token, 'user': user.to_dict()})


@auth_bp.route('/profile', methods=['GET'])
@auth_bp.route('/users/profile', methods=['GET'])
@token_required
def profile(current_user):
    return jsonify(current_user.to_dict())


@auth_bp.route('/profile', methods=['PUT'])
@auth_bp.route('/users/profile', methods=['PUT'])
@token_required
def update_profile(current_user):
    data = json_object()
    updated = UserService.update_profile(current_user, data)
    message = 'Profile updated successfully' if updated else 'No changes were made to the profile'
    return jsonify({'message': message, 'user': current_user.to_dict()}), 200
