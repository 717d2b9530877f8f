# Playlist models: shared external playlist links and their likes

from datetime import datetime
from sqlalchemy.orm import validates
from vinnu.extensions import db


class Playlist(db.Model):
    # One shared external playlist link
    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    url = db.Column(db.String(500), nullable=False)
    provider = db.Column(db.String(50), nullable=False)
    cover_url = db.Column(db.String(500), nullable=False)
    genres = db.Column(db.JSON, default=list)
    tags = db.Column(db.JSON, default=list)  # [{'text': ..., 'color': ...}]

    # Analytics counters, only ever incremented in SQL
    views = db.Column(db.Integer, default=0, nullable=False)
    clicks = db.Column(db.Integer, default=0, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    likes = db.relationship('PlaylistLike', backref='playlist', lazy=True, cascade='all, delete-orphan')

    @validates('owner_id')
    def _owner_is_fixed(self, key, value):
        if self.owner_id is not None and value != self.owner_id:
            raise ValueError('playlist owner cannot change')
        return value

    @property
    def liked_by(self):
        return frozenset(like.user_id for like in self.likes)

    @property
    def likes_count(self):
        return len(self.likes)


class PlaylistLike(db.Model):
    # Account's like on a playlist
    __tablename__ = 'playlist_like'
    __table_args__ = (
        db.UniqueConstraint('playlist_id', 'user_id', name='uq_playlist_like'),
    )

    id = db.Column(db.Integer, primary_key=True)
    playlist_id = db.Column(db.Integer, db.ForeignKey('playlist.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
