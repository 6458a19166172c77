"""
AccountHolder model: the natural person who owns accounts.

Maps the legacy `personanatural` table. Holders are provisioned outside
this service; the back office only reads them (full names for reports,
city for the out-of-city withdrawal report).
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.database import Base


class AccountHolder(Base):
    __tablename__ = "personanatural"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    first_name: Mapped[str] = mapped_column(
        "nombre",
        String(100),
        nullable=False,
    )

    last_name: Mapped[str] = mapped_column(
        "apellido",
        String(100),
        nullable=False,
    )

    # Registered city of residence
    city: Mapped[str] = mapped_column(
        "ciudad",
        String(100),
        nullable=False,
    )

    # --- Relationships ---
    accounts: Mapped[list["Account"]] = relationship(
        back_populates="holder",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
