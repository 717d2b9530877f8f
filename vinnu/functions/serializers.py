# JSON shapes returned by the API

from vinnu.models import User, SOCIAL_PROFILE_KEYS


def _iso(value):
    return value.strftime('%Y-%m-%dT%H:%M:%SZ') if value else None


def social_profiles(user):
    stored = user.social_profiles or {}
    return {key: stored.get(key, '') for key in SOCIAL_PROFILE_KEYS}


def user_summary(user):
    return {
        'id': user.id,
        'username': user.username,
        'firstName': user.first_name,
        'lastName': user.last_name,
        'avatarUrl': user.avatar_url or ''
    }


def users_by_ids(ids):
    # Summaries for a set of account ids, ordered by username
    if not ids:
        return []
    users = User.query.filter(User.id.in_(list(ids))).order_by(User.username).all()
    return [user_summary(u) for u in users]


def user_public(user, show_socials=False):
    data = user_summary(user)
    data.update({
        'bio': user.bio or '',
        'createdAt': _iso(user.created_at),
        'followersCount': user.followers_count,
        'followingCount': user.following_count
    })
    if show_socials:
        data['socialProfiles'] = social_profiles(user)
    return data


def user_private(user):
    # The account's own view, relationship sets populated with summaries
    data = user_public(user, show_socials=True)
    data.update({
        'email': user.email,
        'role': user.role,
        'followers': users_by_ids(user.followers),
        'following': users_by_ids(user.following),
        'friends': users_by_ids(user.friends),
        'friendRequestsSent': users_by_ids(user.friend_requests_sent),
        'friendRequestsReceived': users_by_ids(user.friend_requests_received)
    })
    return data


def user_admin(user):
    data = user_summary(user)
    data.update({
        'email': user.email,
        'role': user.role,
        'isBanned': bool(user.is_banned),
        'bannedReason': user.ban_reason,
        'createdAt': _iso(user.created_at)
    })
    return data


def friend_summary(user):
    data = user_summary(user)
    data['bio'] = user.bio or ''
    data['socialProfiles'] = social_profiles(user)
    return data


def playlist_dict(playlist):
    owner = playlist.owner
    likes = sorted(playlist.liked_by)
    return {
        'id': playlist.id,
        'owner': user_summary(owner) if owner else None,
        'ownerId': playlist.owner_id,
        'title': playlist.title,
        'url': playlist.url,
        'provider': playlist.provider,
        'coverUrl': playlist.cover_url,
        'genre': list(playlist.genres or []),
        'tags': list(playlist.tags or []),
        'likes': likes,
        'likesCount': len(likes),
        'views': playlist.views,
        'clicks': playlist.clicks,
        'createdAt': _iso(playlist.created_at),
        'updatedAt': _iso(playlist.updated_at)
    }
