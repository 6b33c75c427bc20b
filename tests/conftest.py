import pytest
from datetime import timedelta
from decimal import Decimal
from spacebook import create_app, db
from spacebook.config import TestingConfig
from spacebook.models import User, Space, Reservation
from spacebook.models.user import ROLE_USER, ROLE_ADMIN
from spacebook.services.auth_service import AuthService
from spacebook.services.reservation_service import Requester
from spacebook.utils.dates import utcnow

@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture
def client(app):
    return app.test_client()

@pytest.fixture
def users(app):
    # Hashing is slow and irrelevant here; auth tests register real users
    user1 = User(email='user1@test.com', first_name='Ana', last_name='One',
                 password_hash='!', roles=[ROLE_USER])
    user2 = User(email='user2@test.com', first_name='Bo', last_name='Two',
                 password_hash='!', roles=[ROLE_USER])
    admin = User(email='admin@test.com', first_name='Ad', last_name='Min',
                 password_hash='!', roles=[ROLE_USER, ROLE_ADMIN])
    db.session.add_all([user1, user2, admin])
    db.session.commit()
    return user1, user2, admin

@pytest.fixture
def requesters(users):
    return tuple(Requester.from_user(u) for u in users)

@pytest.fixture
def space(app):
    space = Space(name='Room A', description='Meeting room', price=Decimal('50.00'),
                  capacity=10, amenities=['tv'], is_active=True)
    db.session.add(space)
    db.session.commit()
    return space

@pytest.fixture
def tomorrow():
    """Tomorrow at midnight, so tests can pick any hour of that day."""
    return (utcnow() + timedelta(days=1)).replace(hour=0, minute=0, second=0, microsecond=0)

@pytest.fixture
def make_reservation(app):
    """Insert a reservation directly, bypassing the lifecycle checks."""
    def _make(user, space, start, end, status='pending', attendees=1):
        reservation = Reservation(
            user_id=user.id, space_id=space.id, start_time=start, end_time=end,
            status=status, attendees=attendees, total_price=Decimal('0.00')
        )
        db.session.add(reservation)
        db.session.commit()
        return reservation
    return _make

@pytest.fixture
def auth_headers(app):
    def _headers(user):
        return {'Authorization': f'Bearer {AuthService.issue_token(user)}'}
    return _headers
