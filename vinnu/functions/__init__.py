# Functions package

from vinnu.functions.files import (
    allowed_image, save_uploaded_image, resize_image, remove_uploaded_file
)
from vinnu.functions.notifications import (
    LogMailer, SmtpMailer, FriendNotifier, build_mailer
)

__all__ = [
    'allowed_image', 'save_uploaded_image', 'resize_image', 'remove_uploaded_file',
    'LogMailer', 'SmtpMailer', 'FriendNotifier', 'build_mailer'
]
