"""
Utilities
"""

from .noc_number import generate_noc_number

__all__ = [
    'generate_noc_number'
]
