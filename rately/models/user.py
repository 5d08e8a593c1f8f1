"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import Column, Enum, Integer, String

from rately.core.roles import Role
from rately.models.base import Base, TimestampMixin


class User(TimestampMixin, Base):
    """
    Account for JWT authentication and role-based access control.

    email is stored trimmed and lower-cased; uniqueness is enforced by the index.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(60), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    address = Column(String(400), nullable=False)
    role = Column(
        Enum(
            Role,
            name="user_role",
            native_enum=False,
            length=32,
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
        default=Role.NORMAL_USER,
        index=True,
    )
