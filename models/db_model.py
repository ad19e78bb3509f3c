# models/db_model.py
from sqlalchemy import JSON, Column, DateTime, Integer, String, Text, func
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class AnalysisRecord(Base):
    __tablename__ = "analyses"

    id = Column(Integer, primary_key=True)
    combined_statement = Column(Text, nullable=False)
    sentiment = Column(String(32), index=True)
    emotions = Column(JSON)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class PatientSentiment(Base):
    __tablename__ = "patient_sentiments"

    id = Column(Integer, primary_key=True)
    name = Column(String(128), index=True)
    age = Column(String(16))
    sentiment = Column(String(32), index=True)
    emotions = Column(JSON)
    type = Column(String(64))
    country = Column(String(64))
    city = Column(String(64))
    state = Column(String(64))
    gender = Column(String(16))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
