# Car rental back office: database models
# Import all models here for SQLAlchemy discovery

from app.models.user import User                 # noqa
from app.models.branch import Branch             # noqa
from app.models.vehicle import Vehicle           # noqa
from app.models.customer import Customer         # noqa
from app.models.reservation import Reservation   # noqa
from app.models.rental import Rental             # noqa
