import threading

from errors import NotFoundError, UniquenessConflict
from models import (
    User, Event, Ticket, Harambee, Contribution, Rental, Alert, Comment, utcnow,
)
from storage.base import Storage


class _Table:
    """Rows of one entity type keyed by id, with a private id counter."""

    def __init__(self, model):
        self.model = model
        self.rows = {}
        self.lock = threading.RLock()
        self._next_id = 1

    def insert(self, **fields):
        with self.lock:
            record = self.model(id=self._next_id, **fields)
            self.rows[record.id] = record
            self._next_id += 1
            return record

    def get(self, record_id):
        return self.rows.get(record_id)

    def select(self, predicate=None):
        with self.lock:
            records = list(self.rows.values())
        if predicate is not None:
            records = [r for r in records if predicate(r)]
        return records


def _newest_first(records, created_attr, limit, offset):
    records = sorted(records, key=lambda r: (getattr(r, created_attr), r.id), reverse=True)
    return [r.to_dict() for r in records[offset:offset + limit]]


def _by_id(records):
    return [r.to_dict() for r in sorted(records, key=lambda r: r.id)]


class MemStorage(Storage):
    """Dict-backed store for development and tests."""

    def __init__(self):
        self.users = _Table(User)
        self.events = _Table(Event)
        self.tickets = _Table(Ticket)
        self.harambees = _Table(Harambee)
        self.contributions = _Table(Contribution)
        self.rentals = _Table(Rental)
        self.alerts = _Table(Alert)
        self.comments = _Table(Comment)

        # one lock per existing harambee, guarding its raised amount
        self._harambee_locks = {}
        self._harambee_locks_guard = threading.Lock()

    def _harambee_lock(self, harambee_id):
        with self._harambee_locks_guard:
            return self._harambee_locks.get(harambee_id)

    # Users

    def get_user(self, user_id):
        user = self.users.get(user_id)
        return user.to_dict() if user else None

    def get_user_by_username(self, username):
        found = self.users.select(lambda u: u.username == username)
        return found[0].to_dict() if found else None

    def get_user_by_email(self, email):
        found = self.users.select(lambda u: u.email == email)
        return found[0].to_dict() if found else None

    def create_user(self, **fields):
        with self.users.lock:
            users = self.users.rows.values()
            if any(u.username == fields.get('username') for u in users):
                raise UniquenessConflict("Username already exists")
            if any(u.email == fields.get('email') for u in users):
                raise UniquenessConflict("Email already exists")
            fields.setdefault('password', '')
            fields.setdefault('verified', False)
            user = self.users.insert(created_at=utcnow(), **fields)
            return user.to_dict()

    def update_user_verification(self, user_id, verified):
        with self.users.lock:
            user = self.users.get(user_id)
            if user is None:
                return None
            user.verified = bool(verified)
            return user.to_dict()

    # Events

    def get_events(self, limit=10, offset=0):
        return _newest_first(self.events.select(), 'created_at', limit, offset)

    def get_event(self, event_id):
        event = self.events.get(event_id)
        return event.to_dict() if event else None

    def create_event(self, **fields):
        fields.setdefault('price', 0)
        return self.events.insert(created_at=utcnow(), **fields).to_dict()

    # Tickets

    def get_tickets_by_event(self, event_id):
        return _by_id(self.tickets.select(lambda t: t.event_id == event_id))

    def get_tickets_by_user(self, user_id):
        return _by_id(self.tickets.select(lambda t: t.user_id == user_id))

    def create_ticket(self, **fields):
        fields['used'] = False
        return self.tickets.insert(purchased_at=utcnow(), **fields).to_dict()

    # Harambees

    def get_harambees(self, limit=10, offset=0):
        return _newest_first(self.harambees.select(), 'created_at', limit, offset)

    def get_harambee(self, harambee_id):
        lock = self._harambee_lock(harambee_id)
        if lock is None:
            return None
        with lock:
            return self.harambees.get(harambee_id).to_dict()

    def create_harambee(self, **fields):
        fields['raised_amount'] = 0
        fields.setdefault('verified', False)
        with self._harambee_locks_guard:
            harambee = self.harambees.insert(created_at=utcnow(), **fields)
            self._harambee_locks[harambee.id] = threading.Lock()
        return harambee.to_dict()

    # Contributions

    def get_contributions_by_harambee(self, harambee_id):
        lock = self._harambee_lock(harambee_id)
        if lock is None:
            return []
        with lock:
            return _by_id(self.contributions.select(lambda c: c.harambee_id == harambee_id))

    def get_contributions_by_user(self, user_id):
        return _by_id(self.contributions.select(lambda c: c.user_id == user_id))

    def create_contribution(self, **fields):
        harambee_id = fields['harambee_id']
        lock = self._harambee_lock(harambee_id)
        if lock is None:
            raise NotFoundError("Harambee not found")
        with lock:
            harambee = self.harambees.get(harambee_id)
            contribution = self.contributions.insert(contributed_at=utcnow(), **fields)
            harambee.raised_amount += contribution.amount
            return contribution.to_dict(), harambee.to_dict()

    # Rentals

    def get_rentals(self, category=None, limit=10, offset=0):
        predicate = (lambda r: r.category == category) if category else None
        return _newest_first(self.rentals.select(predicate), 'created_at', limit, offset)

    def get_rental(self, rental_id):
        rental = self.rentals.get(rental_id)
        return rental.to_dict() if rental else None

    def create_rental(self, **fields):
        fields.setdefault('is_rental', True)
        return self.rentals.insert(created_at=utcnow(), **fields).to_dict()

    # Alerts

    def get_alerts(self, alert_type=None, limit=10, offset=0):
        predicate = (lambda a: a.type == alert_type) if alert_type else None
        return _newest_first(self.alerts.select(predicate), 'created_at', limit, offset)

    def get_alert(self, alert_id):
        alert = self.alerts.get(alert_id)
        return alert.to_dict() if alert else None

    def create_alert(self, **fields):
        return self.alerts.insert(created_at=utcnow(), **fields).to_dict()

    # Comments

    def get_comments_by_alert(self, alert_id):
        comments = self.comments.select(lambda c: c.alert_id == alert_id)
        comments.sort(key=lambda c: (c.created_at, c.id))
        return [c.to_dict() for c in comments]

    def create_comment(self, **fields):
        if self.alerts.get(fields['alert_id']) is None:
            raise NotFoundError("Alert not found")
        return self.comments.insert(created_at=utcnow(), **fields).to_dict()
