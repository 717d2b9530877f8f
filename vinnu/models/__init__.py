# Models package
# Import all models here for convenience

from vinnu.models.relations import Follow, Friendship, FRIENDSHIP_PENDING, FRIENDSHIP_ACCEPTED
from vinnu.models.user import User, ROLES, ADMIN_ROLES, STAFF_ROLES, SOCIAL_PROFILE_KEYS
from vinnu.models.playlist import Playlist, PlaylistLike

__all__ = [
    'User', 'ROLES', 'ADMIN_ROLES', 'STAFF_ROLES', 'SOCIAL_PROFILE_KEYS',
    'Follow', 'Friendship', 'FRIENDSHIP_PENDING', 'FRIENDSHIP_ACCEPTED',
    'Playlist', 'PlaylistLike'
]
