# Socket.IO handlers package

from vinnu.sockets import events  # noqa
