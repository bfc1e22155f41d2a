from functools import wraps

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from errors import AppError, NotFoundError, StoreFailure, UniquenessConflict
from models import (
    db, User, Event, Ticket, Harambee, Contribution, Rental, Alert, Comment, utcnow,
)
from storage.base import Storage
from utils import MAX_INT, logger


def store_operation(f):
    """Roll back and report unexpected database errors as ``StoreFailure``."""
    @wraps(f)
    def decorated(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except AppError:
            raise
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception(f"Store operation {f.__name__} failed")
            raise StoreFailure()
    return decorated


def _page(query, model, limit, offset):
    if offset > MAX_INT:
        return []
    rows = (
        query
        .order_by(model.created_at.desc(), model.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return [row.to_dict() for row in rows]


def _in_range(record_id):
    return 1 <= record_id <= MAX_INT


def _one(model, record_id):
    if not _in_range(record_id):
        return None
    record = db.session.get(model, record_id)
    return record.to_dict() if record else None


def _add(record):
    db.session.add(record)
    db.session.commit()
    return record.to_dict()


class SQLStorage(Storage):
    """Relational store; needs an active Flask application context."""

    # Users

    @store_operation
    def get_user(self, user_id):
        return _one(User, user_id)

    @store_operation
    def get_user_by_username(self, username):
        user = User.query.filter_by(username=username).first()
        return user.to_dict() if user else None

    @store_operation
    def get_user_by_email(self, email):
        user = User.query.filter_by(email=email).first()
        return user.to_dict() if user else None

    @store_operation
    def create_user(self, **fields):
        fields.setdefault('password', '')
        fields.setdefault('verified', False)
        user = User(created_at=utcnow(), **fields)
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            if User.query.filter_by(username=fields.get('username')).first():
                raise UniquenessConflict("Username already exists")
            raise UniquenessConflict("Email already exists")
        return user.to_dict()

    @store_operation
    def update_user_verification(self, user_id, verified):
        if not _in_range(user_id):
            return None
        user = db.session.get(User, user_id)
        if not user:
            return None
        user.verified = bool(verified)
        db.session.commit()
        return user.to_dict()

    # Events

    @store_operation
    def get_events(self, limit=10, offset=0):
        return _page(Event.query, Event, limit, offset)

    @store_operation
    def get_event(self, event_id):
        return _one(Event, event_id)

    @store_operation
    def create_event(self, **fields):
        fields.setdefault('price', 0)
        return _add(Event(created_at=utcnow(), **fields))

    # Tickets

    @store_operation
    def get_tickets_by_event(self, event_id):
        if not _in_range(event_id):
            return []
        tickets = Ticket.query.filter_by(event_id=event_id).order_by(Ticket.id.asc()).all()
        return [t.to_dict() for t in tickets]

    @store_operation
    def get_tickets_by_user(self, user_id):
        if not _in_range(user_id):
            return []
        tickets = Ticket.query.filter_by(user_id=user_id).order_by(Ticket.id.asc()).all()
        return [t.to_dict() for t in tickets]

    @store_operation
    def create_ticket(self, **fields):
        fields['used'] = False
        return _add(Ticket(purchased_at=utcnow(), **fields))

    # Harambees

    @store_operation
    def get_harambees(self, limit=10, offset=0):
        return _page(Harambee.query, Harambee, limit, offset)

    @store_operation
    def get_harambee(self, harambee_id):
        return _one(Harambee, harambee_id)

    @store_operation
    def create_harambee(self, **fields):
        fields['raised_amount'] = 0
        fields.setdefault('verified', False)
        return _add(Harambee(created_at=utcnow(), **fields))

    # Contributions

    @store_operation
    def get_contributions_by_harambee(self, harambee_id):
        if not _in_range(harambee_id):
            return []
        rows = (
            Contribution.query
            .filter_by(harambee_id=harambee_id)
            .order_by(Contribution.id.asc())
            .all()
        )
        return [c.to_dict() for c in rows]

    @store_operation
    def get_contributions_by_user(self, user_id):
        if not _in_range(user_id):
            return []
        rows = Contribution.query.filter_by(user_id=user_id).order_by(Contribution.id.asc()).all()
        return [c.to_dict() for c in rows]

    @store_operation
    def create_contribution(self, **fields):
        harambee_id = fields['harambee_id']
        if not _in_range(harambee_id):
            raise NotFoundError("Harambee not found")
        # raised_amount = raised_amount + amount, evaluated by the database
        result = db.session.execute(
            update(Harambee)
            .where(Harambee.id == harambee_id)
            .values(raised_amount=Harambee.raised_amount + fields['amount'])
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            db.session.rollback()
            raise NotFoundError("Harambee not found")

        contribution = Contribution(contributed_at=utcnow(), **fields)
        db.session.add(contribution)
        db.session.commit()

        # expired by the commit, so this reloads the incremented total
        harambee = db.session.get(Harambee, harambee_id)
        return contribution.to_dict(), harambee.to_dict()

    # Rentals

    @store_operation
    def get_rentals(self, category=None, limit=10, offset=0):
        query = Rental.query
        if category:
            query = query.filter_by(category=category)
        return _page(query, Rental, limit, offset)

    @store_operation
    def get_rental(self, rental_id):
        return _one(Rental, rental_id)

    @store_operation
    def create_rental(self, **fields):
        fields.setdefault('is_rental', True)
        return _add(Rental(created_at=utcnow(), **fields))

    # Alerts

    @store_operation
    def get_alerts(self, alert_type=None, limit=10, offset=0):
        query = Alert.query
        if alert_type:
            query = query.filter_by(type=alert_type)
        return _page(query, Alert, limit, offset)

    @store_operation
    def get_alert(self, alert_id):
        return _one(Alert, alert_id)

    @store_operation
    def create_alert(self, **fields):
        return _add(Alert(created_at=utcnow(), **fields))

    # Comments

    @store_operation
    def get_comments_by_alert(self, alert_id):
        if not _in_range(alert_id):
            return []
        rows = (
            Comment.query
            .filter_by(alert_id=alert_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
            .all()
        )
        return [c.to_dict() for c in rows]

    @store_operation
    def create_comment(self, **fields):
        if _one(Alert, fields['alert_id']) is None:
            raise NotFoundError("Alert not found")
        return _add(Comment(created_at=utcnow(), **fields))
