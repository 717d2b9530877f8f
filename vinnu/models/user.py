# User-related models

from datetime import datetime
from flask_login import UserMixin
from vinnu.extensions import db
from vinnu.models.relations import Follow, Friendship, FRIENDSHIP_ACCEPTED, FRIENDSHIP_PENDING

ROLES = ('user', 'moderator', 'admin', 'superadmin')
ADMIN_ROLES = ('admin', 'superadmin')
STAFF_ROLES = ('moderator', 'admin', 'superadmin')
SOCIAL_PROFILE_KEYS = ('spotify', 'appleMusic', 'youtube', 'instagram', 'twitter')


class User(UserMixin, db.Model):
    # Registered account with profile, role and ban state
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(30), unique=True, nullable=False, index=True)
    email = db.Column(db.String(254), unique=True, nullable=False, index=True)
    password = db.Column(db.String(256), nullable=False)

    # Profile info
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    bio = db.Column(db.String(160), default="")
    avatar_url = db.Column(db.String(500), default="")
    # Only shown to friends
    social_profiles = db.Column(db.JSON, default=dict)

    # Permissions
    role = db.Column(db.String(20), nullable=False, default='user')

    # Ban management
    is_banned = db.Column(db.Boolean, default=False, nullable=False)
    ban_reason = db.Column(db.String(500), nullable=True)
    banned_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    playlists = db.relationship('Playlist', backref='owner', lazy=True, cascade='all, delete-orphan')

    @property
    def is_active(self):
        return not self.is_banned

    @property
    def is_admin(self):
        return self.role in ADMIN_ROLES

    @property
    def is_superadmin(self):
        return self.role == 'superadmin'

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    # --- relationship sets, derived from edge rows ---

    @property
    def followers(self):
        rows = db.session.query(Follow.follower_id).filter(Follow.followed_id == self.id)
        return frozenset(r[0] for r in rows)

    @property
    def following(self):
        rows = db.session.query(Follow.followed_id).filter(Follow.follower_id == self.id)
        return frozenset(r[0] for r in rows)

    @property
    def followers_count(self):
        return Follow.query.filter_by(followed_id=self.id).count()

    @property
    def following_count(self):
        return Follow.query.filter_by(follower_id=self.id).count()

    @property
    def friends(self):
        rows = Friendship.involving(self.id).filter(Friendship.status == FRIENDSHIP_ACCEPTED)
        return frozenset(f.other(self.id) for f in rows)

    @property
    def friend_requests_sent(self):
        rows = Friendship.involving(self.id).filter(
            Friendship.status == FRIENDSHIP_PENDING,
            Friendship.requester_id == self.id
        )
        return frozenset(f.other(self.id) for f in rows)

    @property
    def friend_requests_received(self):
        rows = Friendship.involving(self.id).filter(
            Friendship.status == FRIENDSHIP_PENDING,
            Friendship.requester_id != self.id
        )
        return frozenset(f.other(self.id) for f in rows)

    @classmethod
    def by_username(cls, username):
        if not username:
            return None
        return cls.query.filter_by(username=username.strip().lower()).first()

    @classmethod
    def by_login(cls, identifier):
        # Login accepts either the email or the username
        if not isinstance(identifier, str):
            return None
        value = identifier.strip().lower()
        if not value:
            return None
        return cls.query.filter(db.or_(cls.email == value, cls.username == value)).first()
