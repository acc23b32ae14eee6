from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from approvaldesk.models.base import Base


class RequestType(Base):
    __tablename__ = "request_types"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
