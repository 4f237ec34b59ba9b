"""
db - Database layer.

Public API:
    init_db()       → create engine + tables
    get_session()   → new Session
    Podcast, User, UserFavorite, UserNote → ORM models
"""

from db.engine import init_db, get_session, dispose_db         # noqa: F401
from db.models import Base, Podcast, User, UserFavorite, UserNote   # noqa: F401
