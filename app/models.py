from sqlalchemy import Column, String, Integer, Boolean, DateTime, Text
from sqlalchemy.types import TypeDecorator
from app.database import Base
from app.utils import encode_frequency_map, decode_frequency_map


class FrequencyMap(TypeDecorator):
    """Character frequency map persisted as JSON text, decoded tolerantly"""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return encode_frequency_map(value)

    def process_result_value(self, value, dialect):
        return decode_frequency_map(value)


class StringAnalysis(Base):
    __tablename__ = "strings"

    # equal values hash to the same id, so the primary key also keeps value unique;
    # lookups by value go through the id and never compare the value column
    id = Column(String(64), primary_key=True)  # SHA-256 hash
    value = Column(Text, nullable=False)
    length = Column(Integer, nullable=False)
    is_palindrome = Column(Boolean, nullable=False)
    unique_characters = Column(Integer, nullable=False)
    word_count = Column(Integer, nullable=False)
    character_frequency_map = Column(FrequencyMap, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)

    @property
    def sha256_hash(self) -> str:
        return self.id

    def __repr__(self):
        return f"StringAnalysis(id={self.id!r})"
