from typing import List

from pymegapi.io.errors import TransportClosedError
from pymegapi.io.transport import Transport


class ChatterboxTransport(Transport):
  """ Chatter box transport for device-free testing. Prints out all sent frames.

  Everything passed to `send` is recorded in `sent`. Bytes "from the board" are injected with
  `receive`, which delivers them synchronously to the `on_bytes` callback.
  """

  def __init__(self, verbose: bool = True) -> None:
    super().__init__()
    self.verbose = verbose
    self.sent: List[bytes] = []
    self._open = False

  @property
  def is_open(self) -> bool:
    return self._open

  async def setup(self) -> None:
    if self.verbose:
      print("Opening the chatterbox link.")
    self._open = True

  async def stop(self) -> None:
    if self.verbose:
      print("Closing the chatterbox link.")
    self._open = False

  def send(self, data: bytes) -> None:
    if not self._open:
      raise TransportClosedError("Cannot write to chatterbox: link is not open")
    if self.verbose:
      print(f"Sending {data.hex(' ')}")
    self.sent.append(bytes(data))

  def receive(self, data: bytes) -> None:
    """ Deliver `data` as if it had been read from the board. """
    self._deliver(bytes(data))

  def fail(self, error: Exception) -> None:
    """ Report a transport level error, as a broken serial link would. """
    self._report_error(error)
