from enum import Enum

class Currency(str, Enum):
    """Enum for currencies"""
    UAH = "UAH"
