class TransportClosedError(ConnectionError):
  """Raised when bytes are sent over a transport whose link is not open."""
