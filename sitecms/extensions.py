"""
Flask Extensions
"""

from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS

# Database instance
db = SQLAlchemy()

# Cross-origin access for the public frontend
cors = CORS()
