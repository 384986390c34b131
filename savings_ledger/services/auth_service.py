"""
Auth service — registration and login.

Registration creates the user, their zero-balance account and
their first (PENDING) device in a single database transaction.
Login checks the password, asks the DeviceGate whether the
presented device is verified, and issues a session token.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from savings_ledger.errors import Conflict, InvalidCredentials
from savings_ledger.models.account import Account
from savings_ledger.models.device import Device
from savings_ledger.models.enums import DeviceStatus, UserRole
from savings_ledger.models.user import User
from savings_ledger.services.device_gate import DeviceGate
from savings_ledger.services.password_hasher import PasswordHasher
from savings_ledger.services.token_service import TokenService
from savings_ledger.services.unit_of_work import unit_of_work

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """Emails are stored and looked up lower-cased."""
    return email.strip().lower()


@dataclass(frozen=True)
class UserView:
    """The non-sensitive attributes of a user."""
    id: int
    email: str
    full_name: str


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: UserView


class AuthService:

    def __init__(
        self,
        session_factory: sessionmaker,
        hasher: PasswordHasher,
        tokens: TokenService,
        device_gate: DeviceGate,
    ):
        self.session_factory = session_factory
        self.hasher = hasher
        self.tokens = tokens
        self.device_gate = device_gate

    def register(
        self,
        email: str,
        full_name: str,
        password: str,
        device_identifier: str,
    ) -> UserView:
        """
        Register a new customer.

        User, Account and Device are created together or not at
        all. Raises Conflict if the email is already registered
        in any letter case, including when a concurrent
        registration for the same email commits first.
        """
        email = normalize_email(email)
        try:
            with unit_of_work(self.session_factory) as db:
                existing = db.execute(
                    select(User.id).where(User.email == email)
                ).scalar_one_or_none()
                if existing is not None:
                    raise Conflict()

                user = User(
                    email=email,
                    full_name=full_name,
                    password_hash=self.hasher.hash(password),
                    role=UserRole.CUSTOMER,
                )
                db.add(user)
                db.flush()

                db.add(Account(user_id=user.id))
                db.add(Device(
                    user_id=user.id,
                    device_identifier=device_identifier,
                    status=DeviceStatus.PENDING,
                ))
                db.flush()
                view = UserView(id=user.id, email=user.email, full_name=user.full_name)
        except IntegrityError as exc:
            raise Conflict() from exc

        logger.info("Registered user %s", view.id)
        return view

    def login(self, email: str, password: str, device_identifier: str) -> LoginResult:
        """
        Authenticate a user on a device.

        Unknown email and wrong password raise the same
        InvalidCredentials error. A correct password on a device
        that is not VERIFIED raises DeviceNotVerified.
        """
        email = normalize_email(email)
        with unit_of_work(self.session_factory) as db:
            user = db.execute(
                select(User).where(User.email == email)
            ).scalar_one_or_none()
            if user is None or not self.hasher.verify(password, user.password_hash):
                logger.info("Login rejected: invalid credentials")
                raise InvalidCredentials()
            role = user.role
            view = UserView(id=user.id, email=user.email, full_name=user.full_name)

        self.device_gate.require_verified(view.id, device_identifier)

        token = self.tokens.issue(view.id, view.email, role)
        logger.info("User %s logged in", view.id)
        return LoginResult(token=token, user=view)
