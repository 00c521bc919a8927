"""Account model."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Account(Base):
    """Account model - one row per user, addressed by userid."""

    __tablename__ = "ACCOUNTS"

    userid: Mapped[str] = mapped_column("USERID", String(63), primary_key=True)
    name: Mapped[str | None] = mapped_column("NAME", String(255))
    email: Mapped[str | None] = mapped_column("EMAIL", String(255))
    balance: Mapped[int | None] = mapped_column("BALANCE", Integer)

    def __repr__(self) -> str:
        return f"<Account {self.userid}>"
