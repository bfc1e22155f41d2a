from flask_sqlalchemy import SQLAlchemy
from datetime import datetime, timezone

db = SQLAlchemy()


def utcnow():
    # naive UTC so SQLite and PostgreSQL round-trip the same value
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _iso(value):
    return value.isoformat() if value else None


class User(db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    password = db.Column(db.String(200), nullable=False, default='')
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    display_name = db.Column(db.String(120))
    photo_url = db.Column(db.Text)
    phone_number = db.Column(db.String(32))
    verified = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'password': self.password,
            'email': self.email,
            'displayName': self.display_name,
            'photoURL': self.photo_url,
            'phoneNumber': self.phone_number,
            'verified': bool(self.verified),
            'createdAt': _iso(self.created_at),
        }


class Event(db.Model):
    __tablename__ = 'events'
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    date = db.Column(db.String(32), nullable=False)
    time = db.Column(db.String(32), nullable=False)
    location = db.Column(db.String(200), nullable=False)
    coordinates = db.Column(db.JSON)
    price = db.Column(db.Integer, default=0, nullable=False)
    image_url = db.Column(db.Text)
    created_by = db.Column(db.Integer, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'date': self.date,
            'time': self.time,
            'location': self.location,
            'coordinates': self.coordinates,
            'price': self.price,
            'imageUrl': self.image_url,
            'createdBy': self.created_by,
            'createdAt': _iso(self.created_at),
        }


class Ticket(db.Model):
    __tablename__ = 'tickets'
    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.Integer, nullable=False, index=True)
    user_id = db.Column(db.Integer, nullable=False, index=True)
    qr_code = db.Column(db.String(64), unique=True, nullable=False)
    used = db.Column(db.Boolean, default=False, nullable=False)
    purchased_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'eventId': self.event_id,
            'userId': self.user_id,
            'qrCode': self.qr_code,
            'used': bool(self.used),
            'purchasedAt': _iso(self.purchased_at),
        }


class Harambee(db.Model):
    __tablename__ = 'harambees'
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    goal_amount = db.Column(db.Integer, nullable=False)
    raised_amount = db.Column(db.BigInteger, default=0, nullable=False)
    image_url = db.Column(db.Text)
    verified = db.Column(db.Boolean, default=False, nullable=False)
    created_by = db.Column(db.Integer, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)

    contributions = db.relationship('Contribution', backref='harambee', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'goalAmount': self.goal_amount,
            'raisedAmount': self.raised_amount,
            'imageUrl': self.image_url,
            'verified': bool(self.verified),
            'createdBy': self.created_by,
            'createdAt': _iso(self.created_at),
        }


class Contribution(db.Model):
    __tablename__ = 'contributions'
    id = db.Column(db.Integer, primary_key=True)
    harambee_id = db.Column(db.Integer, db.ForeignKey('harambees.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, nullable=False, index=True)
    amount = db.Column(db.Integer, nullable=False)
    contributed_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'harambeeId': self.harambee_id,
            'userId': self.user_id,
            'amount': self.amount,
            'contributedAt': _iso(self.contributed_at),
        }


class Rental(db.Model):
    __tablename__ = 'rentals'
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(100), nullable=False, index=True)
    price = db.Column(db.Integer, nullable=False)
    is_rental = db.Column(db.Boolean, default=True, nullable=False)
    location = db.Column(db.String(200), nullable=False)
    image_url = db.Column(db.Text)
    contact_info = db.Column(db.Text, nullable=False)
    created_by = db.Column(db.Integer, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'category': self.category,
            'price': self.price,
            'isRental': bool(self.is_rental),
            'location': self.location,
            'imageUrl': self.image_url,
            'contactInfo': self.contact_info,
            'createdBy': self.created_by,
            'createdAt': _iso(self.created_at),
        }


class Alert(db.Model):
    __tablename__ = 'alerts'
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    type = db.Column(db.String(100), nullable=False, index=True)  # Lost & Found, Emergency, ...
    location = db.Column(db.String(200), nullable=False)
    image_url = db.Column(db.Text)
    created_by = db.Column(db.Integer, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)

    comments = db.relationship('Comment', backref='alert', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'type': self.type,
            'location': self.location,
            'imageUrl': self.image_url,
            'createdBy': self.created_by,
            'createdAt': _iso(self.created_at),
        }


class Comment(db.Model):
    __tablename__ = 'comments'
    id = db.Column(db.Integer, primary_key=True)
    text = db.Column(db.Text, nullable=False)
    alert_id = db.Column(db.Integer, db.ForeignKey('alerts.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'text': self.text,
            'alertId': self.alert_id,
            'userId': self.user_id,
            'createdAt': _iso(self.created_at),
        }
