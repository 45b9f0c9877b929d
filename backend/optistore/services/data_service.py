# Overview: Per-request bundle of the gate and every domain service.

from __future__ import annotations

from .access_service import AccessGate
from .admin_service import AdminService
from .auth_service import AuthService
from .backup_service import BackupService
from .checkup_service import CheckupService
from .customer_service import CustomerService
from .order_service import OrderService
from .reporting_service import ReportingService
from .session_service import SessionStore
from .store_service import StoreService


class DataService:
    """
    Everything a request (or a test) needs, wired to one SessionStore.

    There are no module-level singletons: two DataService instances over
    two storages never see each other's sessions.
    """

    def __init__(
        self,
        sessions: SessionStore,
        *,
        super_admin_username: str,
        super_admin_password_hash: str,
        bcrypt_rounds: int = 12,
    ):
        self.sessions = sessions
        self.gate = AccessGate(sessions)

        self.auth = AuthService(
            sessions,
            super_admin_username=super_admin_username,
            super_admin_password_hash=super_admin_password_hash,
        )
        self.stores = StoreService(self.gate, bcrypt_rounds=bcrypt_rounds)
        self.customers = CustomerService(self.gate)
        self.checkups = CheckupService(self.gate)
        self.orders = OrderService(self.gate)
        self.admin = AdminService(self.gate)
        self.reports = ReportingService(self.gate)
        self.backups = BackupService(self.gate, clock=sessions.clock)
