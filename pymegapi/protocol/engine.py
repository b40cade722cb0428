import asyncio
import logging
from typing import List, Optional

from pymegapi.io.errors import TransportClosedError
from pymegapi.io.transport import Transport
from pymegapi.protocol.codec import Value
from pymegapi.protocol.correlation import CorrelationTable, Resolver
from pymegapi.protocol.framing import (
  ByteArgs,
  DecodedFrame,
  FrameDecoder,
  build_frame,
  encode_frame,
)

logger = logging.getLogger(__name__)


def _future_resolver(fut: asyncio.Future) -> Resolver:
  def resolve(value: Optional[Value]) -> None:
    # the caller may have stopped waiting, e.g. when wrapped in asyncio.wait_for
    if not fut.done():
      fut.set_result(value)

  return resolve


class InvokeEngine:
  """ Sends commands over a transport and matches responses back to the queries that asked.

  `feed` must be called with every chunk the transport receives, in arrival order and from the
  thread running the event loop, which is what `Transport` implementations guarantee for their
  `on_bytes` callback. `invoke` is called from coroutines on the same loop.

  There is no timeout and no retransmission: the future returned for a query whose response never
  arrives stays pending. Wrap it in `asyncio.wait_for` to bound the wait.
  """

  def __init__(self, transport: Transport):
    self.transport = transport
    self.decoder = FrameDecoder()
    self.correlation = CorrelationTable()

  @property
  def pending_count(self) -> int:
    return len(self.correlation)

  def invoke(
    self,
    identifier: int,
    action: int,
    device: int,
    args: ByteArgs = b"",
    expects_response: bool = False,
  ) -> Optional[asyncio.Future]:
    """ Send a command.

    Args:
      identifier: the command identifier (0-255), computed from the addressing parameters.
      action: the action code.
      device: the device code.
      args: encoded argument bytes.
      expects_response: whether the board answers with a value.

    Returns:
      For queries, a future resolved with the decoded value of the next response carrying
      `identifier`. `None` for fire-and-forget commands.

    Raises:
      TransportClosedError: if the transport is not open. Nothing is sent or registered.
    """

    if not self.transport.is_open:
      raise TransportClosedError("Cannot send command: transport is not open")

    loop = asyncio.get_running_loop() if expects_response else None
    frame = encode_frame(identifier, action, device, args)
    self.transport.send(frame)
    logger.debug("Sent command id=0x%02X action=%d device=%d: %s", identifier, action, device,
                 frame.hex(" "))

    if loop is None:
      return None

    # Responses are fed on this thread, so none can be processed between send and register.
    fut = loop.create_future()
    self.correlation.register(identifier, _future_resolver(fut))
    return fut

  def send_payload(self, payload: ByteArgs) -> None:
    """ Send a raw payload that does not follow the identifier/action/device layout. """
    if not self.transport.is_open:
      raise TransportClosedError("Cannot send command: transport is not open")
    self.transport.send(build_frame(payload))

  def feed(self, data: ByteArgs) -> List[DecodedFrame]:
    """ Decode received bytes and resolve the pending callers they answer. """
    frames = self.decoder.feed(data)
    for frame in frames:
      if frame.resolves_caller:
        self.correlation.resolve(frame.identifier, frame.value)
      else:
        logger.debug("Not forwarding %r", frame)
    return frames

  def handle_transport_error(self, error: Exception) -> None:
    """ Transport errors are reported as they are; pending callers are left untouched. """
    logger.error("Transport error: %s", error)

  def close(self) -> None:
    """ Forget all pending callers and any partial frame. Their futures are never resolved. """
    self.correlation.clear()
    self.decoder.reset()
