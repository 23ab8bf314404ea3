import time
from sqlalchemy import Column, String, Integer, BigInteger, Float, Enum as SQLEnum
from hierfs.core.database.base import Base
from hierfs.core.common.enums import EntryKind

def epoch_now() -> float:
    return time.time()

class EntryModel(Base):
    __tablename__ = "entries"

    # The absolute namespace path is the identity of an entry
    path = Column(String, primary_key=True)
    # Listing a directory is a lookup on this column
    parent_path = Column(String, nullable=True, index=True)
    kind = Column(SQLEnum(EntryKind), nullable=False)

    owner = Column(String, nullable=False)
    group = Column(String, nullable=False)
    permission = Column(Integer, nullable=False)

    length = Column(BigInteger, nullable=False, default=0)
    block_size = Column(BigInteger, nullable=False, default=0)
    replication = Column(Integer, nullable=False, default=0)

    modified_at = Column(Float, nullable=False, default=epoch_now)
    accessed_at = Column(Float, nullable=False, default=epoch_now)
