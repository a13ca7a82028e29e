from flask import Blueprint, request, jsonify, current_app
from forms.waitlist import VerificationForm, ResendForm
from services import registration_service, verification_service
from utils.authz import permission_required, WAITLIST_READ, WAITLIST_UPDATE
from utils.errors import ValidationFailed

waitlist_bp = Blueprint('waitlist', __name__, url_prefix='/waitlist')


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@waitlist_bp.route('/register', methods=['POST'])
def register():
    result = registration_service.register(_json_body())
    return jsonify({
        'status': 'success',
        'message': 'Registration successful. Check your email for a verification code.'
        if result.verification_required else 'Registration successful. Welcome to the waitlist!',
        'data': result.to_dict()
    }), 201


@waitlist_bp.route('/verify', methods=['POST'])
def verify():
    form = VerificationForm(data=_json_body())
    if not form.validate():
        raise ValidationFailed(form.error_list())

    verification_service.verify(form.email.data, form.code.data)
    return jsonify({
        'status': 'success',
        'message': 'Email verified successfully. Welcome to the waitlist!'
    })


@waitlist_bp.route('/resend', methods=['POST'])
def resend():
    form = ResendForm(data=_json_body())
    if not form.validate():
        raise ValidationFailed(form.error_list())

    delivered = verification_service.resend(form.email.data)
    return jsonify({
        'status': 'success',
        'message': 'A new verification code has been sent.' if delivered
        else 'A new verification code was issued but could not be delivered. Please try again shortly.',
        'data': {'codeDelivered': delivered}
    })


@waitlist_bp.route('/all', methods=['GET'])
@permission_required(WAITLIST_READ)
def get_all_entries():
    """
    Return waitlist entries, newest first. Verification codes are never included.

    Query params: search, status, and page/limit to paginate.
    """
    page = request.args.get('page', type=int)
    listing = registration_service.list_entries(
        search=request.args.get('search'),
        status=request.args.get('status'),
        page=page,
        per_page=request.args.get('limit', 10, type=int),
    )
    return jsonify({
        'status': 'success',
        'results': len(listing['entries']),
        'total': listing['total'],
        'page': listing['page'],
        'pages': listing['pages'],
        'data': [entry.to_dict() for entry in listing['entries']]
    })


@waitlist_bp.route('/stats', methods=['GET'])
@permission_required(WAITLIST_READ)
def get_stats():
    return jsonify({'status': 'success', 'data': registration_service.waitlist_stats()})


@waitlist_bp.route('/entries/<int:entry_id>/status', methods=['PATCH'])
@permission_required(WAITLIST_UPDATE)
def update_entry_status(entry_id):
    status = _json_body().get('status')
    entry = registration_service.update_entry_status(entry_id, status)
    current_app.logger.info(f"Entry {entry_id} status set to {status}")
    return jsonify({'status': 'success', 'data': entry.to_dict()})
