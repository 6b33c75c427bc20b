from spacebook.extensions import db

ROLE_USER = 'user'
ROLE_ADMIN = 'admin'

class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(180), unique=True, nullable=False)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    roles = db.Column(db.JSON, default=lambda: [ROLE_USER])

    reservations = db.relationship('Reservation', back_populates='user', lazy='dynamic')

    @property
    def is_admin(self):
        return ROLE_ADMIN in (self.roles or [])

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'roles': list(self.roles or [])
        }

    def __repr__(self):
        return f'<User {self.email}>'
