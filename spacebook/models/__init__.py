from spacebook.models.space import Space
from spacebook.models.user import User
from spacebook.models.reservation import Reservation

__all__ = ['Space', 'User', 'Reservation']
