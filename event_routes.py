import secrets

from flask import Blueprint, current_app, request, jsonify

from auth import token_required, payload_with_owner
from storage import get_storage
from utils import logger, pagination_args
from validation import EventCreate, TicketCreate, validate_data

events_bp = Blueprint('events_bp', __name__)


def generate_qr_code():
    return secrets.token_hex(16)


@events_bp.route('/events', methods=['GET'])
def list_events():
    limit, offset = pagination_args(request.args, current_app.config)
    return jsonify(get_storage().get_events(limit=limit, offset=offset))


@events_bp.route('/events/<int:event_id>', methods=['GET'])
def get_event(event_id):
    event = get_storage().get_event(event_id)
    if not event:
        return jsonify({"message": "Event not found"}), 404
    return jsonify(event)


@events_bp.route('/events', methods=['POST'])
@token_required
def create_event():
    data = validate_data(EventCreate, payload_with_owner('createdBy'))
    event = get_storage().create_event(**data)
    logger.info(f"Created event {event['id']} by user {event['createdBy']}")
    return jsonify(event), 201


@events_bp.route('/tickets', methods=['POST'])
@token_required
def create_ticket():
    data = validate_data(TicketCreate, payload_with_owner('userId'))
    # qrCode is always server-generated
    ticket = get_storage().create_ticket(qr_code=generate_qr_code(), **data)
    logger.info(f"Issued ticket {ticket['id']} for event {ticket['eventId']}")
    return jsonify(ticket), 201


@events_bp.route('/tickets/event/<int:event_id>', methods=['GET'])
def tickets_for_event(event_id):
    return jsonify(get_storage().get_tickets_by_event(event_id))


@events_bp.route('/tickets/user/<int:user_id>', methods=['GET'])
def tickets_for_user(user_id):
    return jsonify(get_storage().get_tickets_by_user(user_id))
