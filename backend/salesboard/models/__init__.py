from .sales import CONFIGURABLE_FIELDS, RECORD_FIELDS, SaleRecord
from .auth import Role, User, SessionToken
from .settings import FieldVisibility

__all__ = [
    'CONFIGURABLE_FIELDS', 'RECORD_FIELDS', 'SaleRecord',
    'Role', 'User', 'SessionToken',
    'FieldVisibility',
]
