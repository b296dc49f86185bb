from sqlalchemy import Column, Integer, String, Index

from .base import Base


class CutoffRow(Base):
    __tablename__ = "combined_josaa_in"

    id = Column(Integer, primary_key=True)

    # Program identity
    institute = Column(String, nullable=False)
    academic_program_name = Column(String, nullable=False)
    quota = Column(String, nullable=False)
    seat_type = Column(String, nullable=False)
    gender = Column(String, nullable=False)
    institute_type = Column(String)

    # Admission cycle
    year = Column(Integer, nullable=False)
    round = Column(Integer, nullable=False)

    # Ranks, null when the source cell was blank or malformed
    opening_rank = Column(Integer)
    closing_rank = Column(Integer)

    __table_args__ = (
        Index(
            "ix_cutoff_program_key",
            "institute", "academic_program_name", "quota", "seat_type", "gender",
        ),
        Index("ix_cutoff_cycle", "year", "round"),
    )
