from .chatterbox import ChatterboxTransport
from .errors import TransportClosedError
from .serial import Serial
from .transport import LOG_LEVEL_IO, Transport
