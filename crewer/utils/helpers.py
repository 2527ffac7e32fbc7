"""
General helper utilities
"""
import math
import uuid
from datetime import datetime


def new_uuid() -> str:
    """Primary key generator shared by all models"""
    return str(uuid.uuid4())


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, halves rounded up"""
    return math.floor((end - start).total_seconds() / 60 + 0.5)
