"""
RATS Schemas.

Pydantic models for request validation.
"""

from rats.schemas.auth import *
from rats.schemas.user import *
from rats.schemas.food import *
from rats.schemas.events import *
from rats.schemas.meditation import *
from rats.schemas.nutrition import *
from rats.schemas.ai import *
from rats.schemas.social import *
from rats.schemas.posts import *
from rats.schemas.tasks import *
from rats.schemas.wellness import *
