from spacebook.extensions import db
from spacebook.utils.dates import utcnow

STATUS_PENDING = 'pending'
STATUS_APPROVED = 'approved'
STATUS_REJECTED = 'rejected'
STATUS_CANCELED = 'canceled'

STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED, STATUS_CANCELED)
STATUS_MAX_LENGTH = 20


class Reservation(db.Model):
    __tablename__ = 'reservations'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    space_id = db.Column(db.Integer, db.ForeignKey('spaces.id'), nullable=False, index=True)

    start_time = db.Column(db.DateTime, nullable=False, index=True)
    end_time = db.Column(db.DateTime, nullable=False, index=True)

    status = db.Column(db.String(STATUS_MAX_LENGTH), nullable=False, default=STATUS_PENDING) # pending, approved, rejected, canceled
    notes = db.Column(db.Text, nullable=True)
    attendees = db.Column(db.Integer, nullable=False)
    total_price = db.Column(db.Numeric(12, 2), nullable=False)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=True)

    user = db.relationship('User', back_populates='reservations')
    space = db.relationship('Space', back_populates='reservations')

    __table_args__ = (
        db.CheckConstraint('start_time < end_time', name='check_reservation_interval'),
        db.CheckConstraint('attendees > 0', name='check_reservation_attendees_positive'),
        db.Index('ix_reservations_space_interval', 'space_id', 'start_time', 'end_time'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'space_id': self.space_id,
            'space_name': self.space.name if self.space else None,
            'start_time': self.start_time.isoformat(),
            'end_time': self.end_time.isoformat(),
            'status': self.status,
            'notes': self.notes,
            'attendees': self.attendees,
            'total_price': float(self.total_price),
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }

    def __repr__(self):
        return f'<Reservation {self.id} space={self.space_id} {self.status}>'
