from flask import Blueprint, current_app, request, jsonify

from auth import token_required, payload_with_owner
from storage import get_storage
from utils import logger, normalize_filter, pagination_args
from validation import RentalCreate, validate_data

rentals_bp = Blueprint('rentals_bp', __name__)


@rentals_bp.route('/rentals', methods=['GET'])
def list_rentals():
    category = normalize_filter(request.args.get('category'))
    limit, offset = pagination_args(request.args, current_app.config)
    return jsonify(get_storage().get_rentals(category=category, limit=limit, offset=offset))


@rentals_bp.route('/rentals/<int:rental_id>', methods=['GET'])
def get_rental(rental_id):
    rental = get_storage().get_rental(rental_id)
    if not rental:
        return jsonify({"message": "Rental not found"}), 404
    return jsonify(rental)


@rentals_bp.route('/rentals', methods=['POST'])
@token_required
def create_rental():
    data = validate_data(RentalCreate, payload_with_owner('createdBy'))
    rental = get_storage().create_rental(**data)
    logger.info(f"Created rental listing {rental['id']} in {rental['category']}")
    return jsonify(rental), 201
