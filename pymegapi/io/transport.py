import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

LOG_LEVEL_IO = 5
logging.addLevelName(LOG_LEVEL_IO, "IO")

BytesCallback = Callable[[bytes], None]
ErrorCallback = Callable[[Exception], None]


class Transport(ABC):
  """A full duplex byte stream.

  Received bytes are pushed to the callback registered with `on_bytes`, one call per delivery, on
  the thread running the event loop that called `setup`. Errors the transport runs into while
  reading are pushed to the callback registered with `on_error`.
  """

  def __init__(self):
    self._bytes_callback: Optional[BytesCallback] = None
    self._error_callback: Optional[ErrorCallback] = None

  @abstractmethod
  async def setup(self):
    """Open the link."""

  @abstractmethod
  async def stop(self):
    """Close the link. Closing a link that is not open is a no-op."""

  @property
  @abstractmethod
  def is_open(self) -> bool:
    pass

  @abstractmethod
  def send(self, data: bytes) -> None:
    """Send bytes.

    Raises:
      TransportClosedError: if the link is not open.
    """

  def on_bytes(self, callback: Optional[BytesCallback]) -> None:
    self._bytes_callback = callback

  def on_error(self, callback: Optional[ErrorCallback]) -> None:
    self._error_callback = callback

  def _deliver(self, data: bytes) -> None:
    if self._bytes_callback is not None:
      self._bytes_callback(data)

  def _report_error(self, error: Exception) -> None:
    if self._error_callback is not None:
      self._error_callback(error)

  def serialize(self) -> dict:
    return {"type": self.__class__.__name__}
