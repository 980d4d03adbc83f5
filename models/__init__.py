# models/__init__.py

from .ngo import NGO
from .users import User
from .beneficiary import Beneficiary

__all__ = [
    "NGO",
    "User",
    "Beneficiary"
]
