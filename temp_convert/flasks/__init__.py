"""
Flask app and server utilities for the temperature conversion form.

:author: Doug Skrypa
"""

from .app import create_app
from .server import FlaskServer, init_logging
