"""
Export serializers from each module in this package.
"""

# pylint: disable=W0401

from .review import *
from .queue import *
