from spacebook.extensions import db

class Space(db.Model):
    __tablename__ = 'spaces'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    price = db.Column(db.Numeric(10, 2), nullable=False, default=0)  # per hour
    capacity = db.Column(db.Integer, nullable=False)
    location = db.Column(db.String(255), nullable=True)
    amenities = db.Column(db.JSON, default=list) # e.g. ["projector", "whiteboard"]
    image_url = db.Column(db.String(255), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    # No cascade: spaces with history are soft-disabled, never deleted
    reservations = db.relationship('Reservation', back_populates='space', lazy='dynamic')

    __table_args__ = (
        db.CheckConstraint('capacity > 0', name='check_space_capacity_positive'),
        db.CheckConstraint('price >= 0', name='check_space_price_non_negative'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'price': float(self.price) if self.price is not None else None,
            'capacity': self.capacity,
            'location': self.location,
            'amenities': self.amenities or [],
            'image_url': self.image_url,
            'is_active': self.is_active
        }

    def __repr__(self):
        return f'<Space {self.name}>'
