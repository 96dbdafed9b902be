from sqlalchemy import Column, Integer, DateTime
from ..core.database import Base
from ..utils.timezone import utc_now


class BaseModel(Base):
    __abstract__ = True

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime, default=utc_now, index=True)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)
