import random
from datetime import timedelta
from spacebook import create_app, db
from spacebook.errors import ServiceError
from spacebook.models import User, Space
from spacebook.models.user import ROLE_USER, ROLE_ADMIN
from spacebook.services.availability_service import has_time_overlap
from spacebook.services.reservation_service import ReservationService, Requester
from spacebook.services.space_service import SpaceService
from spacebook.services.user_service import UserService
from spacebook.utils.dates import utcnow

SEED = 42
RESERVATIONS_PER_USER = 4

app = create_app()
rng = random.Random(SEED)

with app.app_context():
    db.create_all()

    # Create Admin
    if not User.query.filter_by(email='admin@spacebook.local').first():
        UserService.register({
            'email': 'admin@spacebook.local',
            'password': 'password',
            'first_name': 'Admin',
            'last_name': 'Spacebook'
        }, roles=[ROLE_USER, ROLE_ADMIN])
        print("Admin created (admin@spacebook.local/password)")

    users_data = [
        ("ana@spacebook.local", "Ana", "Garcia"),
        ("luis@spacebook.local", "Luis", "Martinez"),
        ("marta@spacebook.local", "Marta", "Lopez"),
    ]
    users = []
    for email, first, last in users_data:
        user = User.query.filter_by(email=email).first()
        if not user:
            user = UserService.register({
                'email': email, 'password': 'password', 'first_name': first, 'last_name': last
            })
            print(f"User {email} created.")
        users.append(user)

    # Create Spaces
    spaces_data = [
        {"name": "Meeting Room A", "description": "Small meeting room", "price": 25, "capacity": 6,
         "location": "Floor 1", "amenities": ["tv", "whiteboard"]},
        {"name": "Conference Hall", "description": "Large hall with stage", "price": 120, "capacity": 80,
         "location": "Floor 0", "amenities": ["projector", "sound_system", "stage"]},
        {"name": "Focus Booth", "description": "Single desk booth", "price": 8, "capacity": 1,
         "location": "Floor 2", "amenities": ["desk"]},
        {"name": "Workshop Studio", "description": "Open studio", "price": 60, "capacity": 20,
         "location": "Floor 1", "amenities": ["projector", "whiteboard", "kitchen"]},
    ]
    for s_data in spaces_data:
        if not Space.query.filter_by(name=s_data['name']).first():
            space = SpaceService.create_space(s_data)
            print(f"Space {space.name} created.")

    # Create Reservations through the lifecycle so every invariant holds
    spaces = SpaceService.find_active_spaces()
    tomorrow = utcnow().replace(minute=0, second=0, microsecond=0) + timedelta(days=1)
    planned = []
    for user in users:
        requester = Requester.from_user(user)
        for _ in range(RESERVATIONS_PER_USER):
            space = rng.choice(spaces)
            start = tomorrow.replace(hour=rng.randint(8, 17)) + timedelta(days=rng.randint(0, 13))
            end = start + timedelta(minutes=rng.choice([30, 60, 90, 120]))
            if any(p[0] == space.id and has_time_overlap(start, end, p[1], p[2]) for p in planned):
                continue
            try:
                ReservationService.create(
                    requester, space.id, start, end,
                    attendees=rng.randint(1, space.capacity),
                    notes=rng.choice([None, "Team sync", "Client visit", "Workshop"])
                )
            except ServiceError as e:
                print(f"Skipped reservation on {space.name}: {e.message}")
                continue
            planned.append((space.id, start, end))

    print(f"{len(planned)} reservations created.")
    print("Database seeded successfully.")
