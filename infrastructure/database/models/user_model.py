from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from uuid import UUID as PythonUUID, uuid4

from infrastructure.database.base_model import Base, UUIDType


class User(Base):
    __tablename__ = "users"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    public_id: Mapped[PythonUUID] = mapped_column(UUIDType, unique=True, index=True, nullable=False, default=uuid4)
    username: Mapped[str] = mapped_column(String(32), unique=True, index=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    # Timestamps inherited
    def __repr__(self): return f"<User(id={self.id!r}, username={self.username!r})>"
