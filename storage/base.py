from abc import ABC, abstractmethod


class Storage(ABC):
    """Entity store contract; methods return camelCase dicts, missing ids give None."""

    # Users
    @abstractmethod
    def get_user(self, user_id):
        ...

    @abstractmethod
    def get_user_by_username(self, username):
        ...

    @abstractmethod
    def get_user_by_email(self, email):
        ...

    @abstractmethod
    def create_user(self, **fields):
        ...

    @abstractmethod
    def update_user_verification(self, user_id, verified):
        ...

    # Events
    @abstractmethod
    def get_events(self, limit=10, offset=0):
        ...

    @abstractmethod
    def get_event(self, event_id):
        ...

    @abstractmethod
    def create_event(self, **fields):
        ...

    # Tickets
    @abstractmethod
    def get_tickets_by_event(self, event_id):
        ...

    @abstractmethod
    def get_tickets_by_user(self, user_id):
        ...

    @abstractmethod
    def create_ticket(self, **fields):
        ...

    # Harambees
    @abstractmethod
    def get_harambees(self, limit=10, offset=0):
        ...

    @abstractmethod
    def get_harambee(self, harambee_id):
        ...

    @abstractmethod
    def create_harambee(self, **fields):
        ...

    # Contributions
    @abstractmethod
    def get_contributions_by_harambee(self, harambee_id):
        ...

    @abstractmethod
    def get_contributions_by_user(self, user_id):
        ...

    @abstractmethod
    def create_contribution(self, **fields):
        """Returns ``(contribution, harambee)``; raises ``NotFoundError`` without writing."""

    # Rentals
    @abstractmethod
    def get_rentals(self, category=None, limit=10, offset=0):
        ...

    @abstractmethod
    def get_rental(self, rental_id):
        ...

    @abstractmethod
    def create_rental(self, **fields):
        ...

    # Alerts
    @abstractmethod
    def get_alerts(self, alert_type=None, limit=10, offset=0):
        ...

    @abstractmethod
    def get_alert(self, alert_id):
        ...

    @abstractmethod
    def create_alert(self, **fields):
        ...

    # Comments
    @abstractmethod
    def get_comments_by_alert(self, alert_id):
        ...

    @abstractmethod
    def create_comment(self, **fields):
        ...
