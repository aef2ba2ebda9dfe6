"""Administrator account model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from wayamba.models.base import Base


class AdminUser(Base):
    """Administrator allowed to moderate feedback. Provisioned by deploy/create_admin.py."""
    
    __tablename__ = "admin_users"
    
    username: Mapped[str] = mapped_column(String(150), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    
    def __repr__(self) -> str:
        return f"<AdminUser {self.username}>"
