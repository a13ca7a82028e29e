from flask import Blueprint, request, jsonify
from flask_login import current_user
from services import auth_service
from utils.authz import permission_required, ADMINS_MANAGE

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@admin_bp.route('/login', methods=['POST'])
def login():
    data = _json_body()
    token, admin = auth_service.authenticate(data.get('email'), data.get('password'))
    return jsonify({
        'status': 'success',
        'token': token,
        'data': {'admin': admin.to_dict()}
    })


@admin_bp.route('/profile', methods=['GET'])
@permission_required()
def get_profile():
    return jsonify({'status': 'success', 'data': {'admin': current_user.to_dict()}})


@admin_bp.route('/create', methods=['POST'])
@permission_required(ADMINS_MANAGE)
def create_admin():
    data = _json_body()
    admin = auth_service.create_admin(
        email=data.get('email'),
        password=data.get('password'),
        name=data.get('name'),
        role=data.get('role', 'admin'),
    )
    return jsonify({'status': 'success', 'data': {'admin': admin.to_dict()}}), 201


@admin_bp.route('/all', methods=['GET'])
@permission_required(ADMINS_MANAGE)
def get_all_admins():
    admins = auth_service.list_admins()
    return jsonify({
        'status': 'success',
        'results': len(admins),
        'data': {'admins': [admin.to_dict() for admin in admins]}
    })


@admin_bp.route('/<int:admin_id>/toggle-status', methods=['PATCH'])
@permission_required(ADMINS_MANAGE)
def toggle_admin_status(admin_id):
    admin = auth_service.toggle_admin_status(admin_id, current_user)
    return jsonify({'status': 'success', 'data': {'admin': admin.to_dict()}})
