from flask import Blueprint, current_app, request, jsonify

from auth import token_required, payload_with_owner
from storage import get_storage
from utils import logger, pagination_args
from validation import HarambeeCreate, ContributionCreate, validate_data

harambees_bp = Blueprint('harambees_bp', __name__)


@harambees_bp.route('/harambees', methods=['GET'])
def list_harambees():
    limit, offset = pagination_args(request.args, current_app.config)
    return jsonify(get_storage().get_harambees(limit=limit, offset=offset))


@harambees_bp.route('/harambees/<int:harambee_id>', methods=['GET'])
def get_harambee(harambee_id):
    harambee = get_storage().get_harambee(harambee_id)
    if not harambee:
        return jsonify({"message": "Harambee not found"}), 404
    return jsonify(harambee)


@harambees_bp.route('/harambees', methods=['POST'])
@token_required
def create_harambee():
    data = validate_data(HarambeeCreate, payload_with_owner('createdBy'))
    harambee = get_storage().create_harambee(**data)
    logger.info(f"Created harambee {harambee['id']} with goal {harambee['goalAmount']}")
    return jsonify(harambee), 201


@harambees_bp.route('/harambees/<int:harambee_id>/contributions', methods=['GET'])
def contributions_for_harambee(harambee_id):
    storage = get_storage()
    if not storage.get_harambee(harambee_id):
        return jsonify({"message": "Harambee not found"}), 404
    return jsonify(storage.get_contributions_by_harambee(harambee_id))


@harambees_bp.route('/contributions', methods=['POST'])
@token_required
def create_contribution():
    data = validate_data(ContributionCreate, payload_with_owner('userId'))
    contribution, harambee = get_storage().create_contribution(**data)
    logger.info(
        f"Contribution {contribution['id']} of {contribution['amount']} to harambee "
        f"{harambee['id']}, raised {harambee['raisedAmount']}/{harambee['goalAmount']}"
    )
    return jsonify({"contribution": contribution, "harambee": harambee}), 201


@harambees_bp.route('/contributions/user/<int:user_id>', methods=['GET'])
def contributions_for_user(user_id):
    return jsonify(get_storage().get_contributions_by_user(user_id))
