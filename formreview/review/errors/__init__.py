"""
Export errors from all modules defined in this package.
"""

# pylint:disable=W0401

from .aggregation import *
from .base import *
from .review import *
