# Relationship edges between accounts
# Each edge is stored once; the per-account sets are derived from these rows

from datetime import datetime
from sqlalchemy import or_
from vinnu.extensions import db

FRIENDSHIP_PENDING = 'pending'
FRIENDSHIP_ACCEPTED = 'accepted'


class Follow(db.Model):
    # follower -> followed, one row per ordered pair
    __tablename__ = 'follow'
    __table_args__ = (
        db.UniqueConstraint('follower_id', 'followed_id', name='uq_follow_pair'),
        db.CheckConstraint('follower_id != followed_id', name='ck_follow_not_self'),
    )

    id = db.Column(db.Integer, primary_key=True)
    follower_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    followed_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    @classmethod
    def find(cls, follower_id, followed_id):
        return cls.query.filter_by(follower_id=follower_id, followed_id=followed_id).first()


class Friendship(db.Model):
    # One row per unordered pair, stored as (low, high) with low < high.
    # status 'pending' means requester_id is waiting on the other side,
    # status 'accepted' is a confirmed mutual friendship.
    __tablename__ = 'friendship'
    __table_args__ = (
        db.UniqueConstraint('user_low_id', 'user_high_id', name='uq_friendship_pair'),
        db.CheckConstraint('user_low_id < user_high_id', name='ck_friendship_low_lt_high'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_low_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    user_high_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    requester_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=FRIENDSHIP_PENDING)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    accepted_at = db.Column(db.DateTime, nullable=True)

    @staticmethod
    def pair(a_id, b_id):
        return (a_id, b_id) if a_id < b_id else (b_id, a_id)

    @classmethod
    def between(cls, a_id, b_id):
        low, high = cls.pair(a_id, b_id)
        return cls.query.filter_by(user_low_id=low, user_high_id=high).first()

    @classmethod
    def create_request(cls, requester_id, target_id):
        low, high = cls.pair(requester_id, target_id)
        return cls(user_low_id=low, user_high_id=high, requester_id=requester_id, status=FRIENDSHIP_PENDING)

    @classmethod
    def involving(cls, user_id):
        return cls.query.filter(or_(cls.user_low_id == user_id, cls.user_high_id == user_id))

    @property
    def is_accepted(self):
        return self.status == FRIENDSHIP_ACCEPTED

    def other(self, user_id):
        return self.user_high_id if user_id == self.user_low_id else self.user_low_id

    def accept(self):
        self.status = FRIENDSHIP_ACCEPTED
        self.accepted_at = datetime.utcnow()
