"""
Operator authentication.

Verifies credentials against the hr_users table and issues signed,
time-limited session tokens.
"""

from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from hr_service.core.config import Settings
from hr_service.core.exceptions import Unauthenticated
from hr_service.core.logging import get_logger
from hr_service.core.security import TokenData, create_access_token, verify_password
from hr_service.models.operator import Operator

logger = get_logger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


class AuthService:
    """Service for operator login."""

    def __init__(self, engine: Engine, settings: Settings):
        self.engine = engine
        self.settings = settings

    def login(self, email: str, password: str) -> str:
        """
        Verify an operator's credentials and issue a session token.

        Unknown emails and wrong passwords fail with the same message so the
        response never reveals whether an account exists.

        Raises:
            Unauthenticated: if the credentials do not match an operator
        """
        with Session(self.engine) as session:
            operator = session.exec(
                select(Operator).where(Operator.email == email)
            ).first()

        if not operator:
            logger.warning(f"Login failed for {email}: unknown email")
            raise Unauthenticated(INVALID_CREDENTIALS_MESSAGE)

        if not verify_password(password, operator.password_hash):
            logger.warning(f"Login failed for {email}: wrong password")
            raise Unauthenticated(INVALID_CREDENTIALS_MESSAGE)

        token = create_access_token(
            TokenData(id=operator.id, email=operator.email, name=operator.name),
            self.settings,
        )
        logger.info(f"Operator {operator.id} ({email}) logged in")
        return token
