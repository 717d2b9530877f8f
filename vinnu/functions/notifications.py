# Notification sender: friend-request emails and socket pushes
#
# Mailers are plain objects with send(to, subject, text, html=None). The
# FriendNotifier is built once per app in create_app and stored on
# app.extensions, so tests can pass their own mailer.

import logging
import smtplib
from email.message import EmailMessage
from markupsafe import escape

logger = logging.getLogger(__name__)


class LogMailer:
    # Used when no MAIL_SERVER is configured: logs instead of sending
    def send(self, to, subject, text, html=None):
        logger.info(f"[MAIL] (not sent) to={to} subject={subject!r}")


class SmtpMailer:
    def __init__(self, host, port=587, username=None, password=None, sender=None, use_tls=True, timeout=10):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender or username
        self.use_tls = use_tls
        self.timeout = timeout

    def build_message(self, to, subject, text, html=None):
        msg = EmailMessage()
        msg['From'] = self.sender
        msg['To'] = to
        msg['Subject'] = subject
        msg.set_content(text)
        if html:
            msg.add_alternative(html, subtype='html')
        return msg

    def send(self, to, subject, text, html=None):
        msg = self.build_message(to, subject, text, html)
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password)
            smtp.send_message(msg)
        logger.info(f"[MAIL] sent to={to} subject={subject!r}")


def build_mailer(config):
    if config.get('MAIL_SERVER'):
        return SmtpMailer(
            host=config['MAIL_SERVER'],
            port=config.get('MAIL_PORT', 587),
            username=config.get('MAIL_USERNAME') or None,
            password=config.get('MAIL_PASSWORD') or None,
            sender=config.get('MAIL_SENDER'),
            use_tls=config.get('MAIL_USE_TLS', True)
        )
    return LogMailer()


class FriendNotifier:
    # Best-effort side effects of friend-request transitions.
    # Each channel fails on its own; nothing here raises to the caller.

    def __init__(self, mailer, socketio=None, frontend_url=''):
        self.mailer = mailer
        self.socketio = socketio
        self.frontend_url = (frontend_url or '').rstrip('/')

    def _mail(self, to, subject, text, html=None):
        try:
            self.mailer.send(to, subject, text, html)
            return True
        except Exception:
            logger.warning(f"[MAIL] failed to send {subject!r} to {to}", exc_info=True)
            return False

    def _push(self, user_id, event, payload):
        if self.socketio is None:
            return
        try:
            self.socketio.emit(event, payload, room=f"user_{user_id}")
        except Exception:
            logger.warning(f"[SOCKET] failed to emit {event} to user_{user_id}", exc_info=True)

    def friend_request_sent(self, sender, recipient):
        link = f"{self.frontend_url}/friends"
        subject = f"{sender.full_name} sent you a friend request on Vinnu"
        text = (
            f"Hi {recipient.full_name},\n\n"
            f"{sender.full_name} (@{sender.username}) wants to be your friend on Vinnu!\n\n"
            f"Log in to accept or decline this request: {link}\n\n"
            "This is an automated message from Vinnu."
        )
        html = (
            f"<p>Hi <strong>{escape(recipient.full_name)}</strong>,</p>"
            f"<p><strong>{escape(sender.full_name)}</strong> (@{sender.username}) wants to be your friend on Vinnu!</p>"
            f"<p><a href=\"{link}\">View Request</a></p>"
        )
        self._push(recipient.id, 'friend_request', {
            'from': sender.username,
            'status': 'pending_received'
        })
        return self._mail(recipient.email, subject, text, html)

    def friend_request_accepted(self, accepter, requester):
        link = f"{self.frontend_url}/friends"
        subject = f"{accepter.first_name} accepted your friend request!"
        text = f"{accepter.full_name} accepted your friend request!\n\nView friends: {link}"
        html = (
            f"<p><strong>{escape(accepter.full_name)}</strong> accepted your friend request!</p>"
            f"<p><a href=\"{link}\">View Friends</a></p>"
        )
        self._push(requester.id, 'friend_request_accepted', {
            'from': accepter.username,
            'status': 'friends'
        })
        return self._mail(requester.email, subject, text, html)
