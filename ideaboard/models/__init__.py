"""
Idea Board – SQLAlchemy ORM models package.

Imports all model classes so the app and seed scripts can discover them
through a single ``from ideaboard.models import *`` import.
"""

from ideaboard.models.user import User, Role          # noqa: F401
from ideaboard.models.category import Category        # noqa: F401
from ideaboard.models.idea import Idea, IdeaStatus    # noqa: F401
from ideaboard.models.comment import Comment          # noqa: F401
from ideaboard.models.vote import Vote                # noqa: F401
