"""
Base Value Object Class
"""
from abc import ABC
from pydantic import BaseModel


class ValueObject(BaseModel, ABC):
    """Value Object Base Class"""

    model_config = {
        # Value objects are immutable
        "frozen": True,
        "arbitrary_types_allowed": True
    }
