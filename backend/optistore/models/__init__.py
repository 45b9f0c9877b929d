from .tenancy import Store, OrderSequence, generate_id
from .customers import Customer
from .checkups import Checkup, MEASUREMENT_FIELDS
from .orders import Order, ORDER_STATUSES, amount_to_float

__all__ = [
    'Store', 'OrderSequence', 'generate_id',
    'Customer',
    'Checkup', 'MEASUREMENT_FIELDS',
    'Order', 'ORDER_STATUSES', 'amount_to_float',
]
