from flask import Blueprint, Response, request, jsonify, stream_with_context
from services import analytics_service
from utils.authz import permission_required, ANALYTICS_READ, ANALYTICS_EXPORT

analytics_bp = Blueprint('analytics', __name__, url_prefix='/analytics')


@analytics_bp.route('', methods=['GET'])
@permission_required(ANALYTICS_READ)
def get_analytics():
    """Growth, industry and company size breakdowns and pain point keywords."""
    data = analytics_service.dashboard(request.args.get('days'))
    return jsonify({'status': 'success', 'data': data})


@analytics_bp.route('/export', methods=['GET'])
@permission_required(ANALYTICS_EXPORT)
def export_data():
    # Rows are read up front so the stream is one consistent snapshot
    rows = analytics_service.export_snapshot()
    filename = analytics_service.export_filename()
    return Response(
        stream_with_context(analytics_service.iter_csv(rows)),
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={filename}'}
    )
