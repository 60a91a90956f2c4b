from sqlalchemy import Column, TIMESTAMP
from sqlalchemy.sql import func
from supermarket.connections.database import Base


class CommonModel(Base):
    """Base model with common fields for all models"""
    __abstract__ = True

    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now()
    )

    updated_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now()
        # no onupdate here: rely on DB trigger so raw SQL updates get the timestamp too
    )
