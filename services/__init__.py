"""
services - Business-logic layer sitting between API and DB.
"""

from services.podcasts_service import PodcastsService, ValidationError   # noqa: F401
from services.search_service import SearchService                        # noqa: F401
from services.users_service import UsersService                          # noqa: F401
from services.podcast_store import PodcastStore                          # noqa: F401
