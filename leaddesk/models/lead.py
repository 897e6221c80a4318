"""
Lead model - one row per quote/service request submitted through the website.
Rows are inserted and deleted, never updated.
"""
from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from leaddesk.database import Base


class Lead(Base):
    __tablename__ = "leads"
    # AUTOINCREMENT so ids are never reused after a delete
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # ISO-8601 UTC with a fixed width, so text ordering is time ordering
    created_at: Mapped[str] = mapped_column("createdAt", String(32), nullable=False)

    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False)
    phone: Mapped[str] = mapped_column(Text, default="")
    service: Mapped[str] = mapped_column(Text, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    source: Mapped[str] = mapped_column(Text, nullable=False, default="unknown")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "createdAt": self.created_at,
            "name": self.name,
            "email": self.email,
            "phone": self.phone or "",
            "service": self.service,
            "message": self.message,
            "source": self.source,
        }

    def __repr__(self) -> str:
        return f"<Lead id={self.id} source={self.source} service={self.service!r}>"
