"""
Fahrenheit / Celsius temperature conversion, with a small Flask form for interactive use.

:author: Doug Skrypa
"""

from .conversion import *
