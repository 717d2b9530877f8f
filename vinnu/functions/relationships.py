# Relationship engine: follow and friend-request state machines
#
# Operations take User records, validate the transition, write the edge rows
# and commit once per call. Notifications are sent only after a successful
# commit, through the notifier passed in by the caller.

import enum
import logging
from collections import namedtuple
from vinnu.extensions import db
from vinnu.errors import (
    InvalidOperation, NotFound, AlreadyFriends, RequestAlreadySent,
    NoPendingRequest, NotFriends
)
from vinnu.models import Follow, Friendship
from vinnu.functions.transaction import run_in_transaction

logger = logging.getLogger(__name__)


class FriendStatus(str, enum.Enum):
    # Pair state seen from the viewer's side
    NONE = 'none'
    PENDING_SENT = 'pending_sent'
    PENDING_RECEIVED = 'pending_received'
    FRIENDS = 'friends'


FollowResult = namedtuple('FollowResult', [
    'is_following',
    'viewer_followers_count', 'viewer_following_count',
    'target_followers_count', 'target_following_count'
])

FriendStatusView = namedtuple('FriendStatusView', ['status', 'can_see_socials'])


def _check_pair(actor, target, action):
    if target is None:
        raise NotFound('User not found')
    if actor.id == target.id:
        raise InvalidOperation(f'Cannot {action} yourself')


def _status_from_row(viewer_id, row):
    if row is None:
        return FriendStatus.NONE
    if row.is_accepted:
        return FriendStatus.FRIENDS
    if row.requester_id == viewer_id:
        return FriendStatus.PENDING_SENT
    return FriendStatus.PENDING_RECEIVED


def _notify(notifier, event, *args):
    # Notifications never affect the outcome of a committed transition
    if notifier is None:
        return
    try:
        getattr(notifier, event)(*args)
    except Exception:
        logger.warning(f"[NOTIFY] {event} failed", exc_info=True)


# --- follow ---

def _toggle_follow(viewer, target):
    edge = Follow.find(viewer.id, target.id)
    if edge:
        db.session.delete(edge)
        now_following = False
    else:
        db.session.add(Follow(follower_id=viewer.id, followed_id=target.id))
        now_following = True
    db.session.flush()
    return now_following


def toggle_follow(viewer, target):
    # Flip viewer -> target between following and not-following
    _check_pair(viewer, target, 'follow')
    is_following = run_in_transaction(_toggle_follow, viewer, target)
    logger.info(f"[FOLLOW] {viewer.username} {'->' if is_following else '-X->'} {target.username}")
    return FollowResult(
        is_following=is_following,
        viewer_followers_count=viewer.followers_count,
        viewer_following_count=viewer.following_count,
        target_followers_count=target.followers_count,
        target_following_count=target.following_count
    )


def is_following(viewer, target):
    if target is None:
        raise NotFound('User not found')
    return Follow.find(viewer.id, target.id) is not None


# --- friend requests ---

def get_friend_status(viewer, target):
    # Pure read: pair state from the viewer's side plus social visibility
    if target is None:
        raise NotFound('User not found')
    if viewer.id == target.id:
        return FriendStatusView(FriendStatus.NONE, False)
    status = _status_from_row(viewer.id, Friendship.between(viewer.id, target.id))
    return FriendStatusView(status, status is FriendStatus.FRIENDS)


def can_see_socials(viewer, target):
    if viewer is None:
        return False
    if viewer.id == target.id:
        return True
    return get_friend_status(viewer, target).can_see_socials


def _send_request(requester, target):
    row = Friendship.between(requester.id, target.id)
    status = _status_from_row(requester.id, row)
    if status is FriendStatus.FRIENDS:
        raise AlreadyFriends()
    if status is FriendStatus.PENDING_SENT:
        raise RequestAlreadySent()
    if status is FriendStatus.PENDING_RECEIVED:
        # The other side already asked: collapse straight into a friendship
        row.accept()
        db.session.flush()
        return FriendStatus.FRIENDS
    db.session.add(Friendship.create_request(requester.id, target.id))
    db.session.flush()
    return FriendStatus.PENDING_SENT


def send_friend_request(requester, target, notifier=None):
    # Returns FriendStatus.PENDING_SENT for a new request, FRIENDS on auto-accept
    _check_pair(requester, target, 'send a friend request to')
    status = run_in_transaction(_send_request, requester, target)
    if status is FriendStatus.FRIENDS:
        logger.info(f"[FRIEND REQUEST] {requester.username} <-> {target.username} auto-accepted")
        _notify(notifier, 'friend_request_accepted', requester, target)
    else:
        logger.info(f"[FRIEND REQUEST] {requester.username} -> {target.username}")
        _notify(notifier, 'friend_request_sent', requester, target)
    return status


def _accept_request(accepter, requester):
    row = Friendship.between(accepter.id, requester.id)
    if _status_from_row(accepter.id, row) is not FriendStatus.PENDING_RECEIVED:
        raise NoPendingRequest()
    row.accept()
    db.session.flush()
    return FriendStatus.FRIENDS


def accept_friend_request(accepter, requester, notifier=None):
    _check_pair(accepter, requester, 'accept a friend request from')
    status = run_in_transaction(_accept_request, accepter, requester)
    logger.info(f"[FRIEND ACCEPT] {accepter.username} accepted {requester.username}")
    _notify(notifier, 'friend_request_accepted', accepter, requester)
    return status


def _drop_pending(user, other, expected):
    # Removes the pending row only when it points the expected way
    row = Friendship.between(user.id, other.id)
    if _status_from_row(user.id, row) is expected:
        db.session.delete(row)
        db.session.flush()
        return True
    return False


def reject_friend_request(rejecter, requester):
    _check_pair(rejecter, requester, 'reject a friend request from')
    removed = run_in_transaction(_drop_pending, rejecter, requester, FriendStatus.PENDING_RECEIVED)
    if removed:
        logger.info(f"[FRIEND REJECT] {rejecter.username} rejected {requester.username}")
    return FriendStatus.NONE if removed else get_friend_status(rejecter, requester).status


def cancel_friend_request(canceler, target):
    _check_pair(canceler, target, 'cancel a friend request to')
    removed = run_in_transaction(_drop_pending, canceler, target, FriendStatus.PENDING_SENT)
    if removed:
        logger.info(f"[FRIEND CANCEL] {canceler.username} cancelled request to {target.username}")
    return FriendStatus.NONE if removed else get_friend_status(canceler, target).status


def _remove_friend(user, other):
    row = Friendship.between(user.id, other.id)
    if row is None or not row.is_accepted:
        raise NotFriends()
    db.session.delete(row)
    db.session.flush()
    return FriendStatus.NONE


def remove_friend(user, other):
    _check_pair(user, other, 'unfriend')
    status = run_in_transaction(_remove_friend, user, other)
    logger.info(f"[FRIEND REMOVE] {user.username} -X- {other.username}")
    return status


def purge_relationships(user_id):
    # Drops every edge touching the account; caller commits
    Follow.query.filter(
        db.or_(Follow.follower_id == user_id, Follow.followed_id == user_id)
    ).delete(synchronize_session=False)
    Friendship.query.filter(
        db.or_(
            Friendship.user_low_id == user_id,
            Friendship.user_high_id == user_id,
            Friendship.requester_id == user_id
        )
    ).delete(synchronize_session=False)
