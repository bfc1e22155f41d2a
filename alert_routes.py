from flask import Blueprint, current_app, request, jsonify

from auth import token_required, payload_with_owner
from storage import get_storage
from utils import logger, normalize_filter, pagination_args
from validation import AlertCreate, CommentCreate, validate_data

alerts_bp = Blueprint('alerts_bp', __name__)


@alerts_bp.route('/alerts', methods=['GET'])
def list_alerts():
    alert_type = normalize_filter(request.args.get('type'))
    limit, offset = pagination_args(request.args, current_app.config)
    return jsonify(get_storage().get_alerts(alert_type=alert_type, limit=limit, offset=offset))


@alerts_bp.route('/alerts/<int:alert_id>', methods=['GET'])
def get_alert(alert_id):
    alert = get_storage().get_alert(alert_id)
    if not alert:
        return jsonify({"message": "Alert not found"}), 404
    return jsonify(alert)


@alerts_bp.route('/alerts', methods=['POST'])
@token_required
def create_alert():
    data = validate_data(AlertCreate, payload_with_owner('createdBy'))
    alert = get_storage().create_alert(**data)
    logger.info(f"Created {alert['type']} alert {alert['id']}")
    return jsonify(alert), 201


@alerts_bp.route('/alerts/<int:alert_id>/comments', methods=['GET'])
def comments_for_alert(alert_id):
    storage = get_storage()
    if not storage.get_alert(alert_id):
        return jsonify({"message": "Alert not found"}), 404
    return jsonify(storage.get_comments_by_alert(alert_id))


@alerts_bp.route('/comments', methods=['POST'])
@token_required
def create_comment():
    data = validate_data(CommentCreate, payload_with_owner('userId'))
    comment = get_storage().create_comment(**data)
    return jsonify(comment), 201
