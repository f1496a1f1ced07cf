"""
Form submission and peer review.
"""

__version__ = '0.1.0'
