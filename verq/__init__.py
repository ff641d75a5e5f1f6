"""
Verq - AI mock interview backend.
"""

__version__ = "1.0.0"
