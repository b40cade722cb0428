import asyncio
import logging
from typing import Optional

from pymegapi.config import Config
from pymegapi.io import Serial, Transport
from pymegapi.machines import MachineBackend
from pymegapi.megapi.commands import RESET_PAYLOAD, CommandSpec
from pymegapi.protocol import InvokeEngine, Value
from pymegapi.protocol.codec import decode_string
from pymegapi.protocol.framing import ByteArgs

logger = logging.getLogger(__name__)


class MegaPiBackend(MachineBackend):
  """ Backend for the Makeblock MegaPi controller board.

  Owns the transport (by default the serial port the board is attached to) and the protocol engine
  running on top of it. When the port is opened the firmware prints a version banner; `setup` waits
  for it (up to `banner_timeout` seconds) before the link is used for commands.
  """

  def __init__(
    self,
    port: str = "/dev/ttyAMA0",
    baudrate: int = 115200,
    io: Optional[Transport] = None,
    wait_for_firmware: bool = True,
    banner_timeout: float = 10.0,
  ):
    """

    Args:
      port: serial port of the board. Ignored if `io` is given.
      baudrate: serial baud rate. Ignored if `io` is given.
      io: the transport to use instead of a serial port, e.g. a `ChatterboxTransport`.
      wait_for_firmware: whether `setup` waits for the firmware banner.
      banner_timeout: how long to wait for the banner, in seconds.
    """

    super().__init__()
    self.io = io if io is not None else Serial(port=port, baudrate=baudrate)
    self.engine = InvokeEngine(self.io)
    self.wait_for_firmware = wait_for_firmware
    self.banner_timeout = banner_timeout
    self.firmware_banner: Optional[str] = None
    self._banner: Optional[asyncio.Future] = None

  @classmethod
  def from_config(cls, cfg: Config, **kwargs) -> "MegaPiBackend":
    return cls(port=cfg.serial.port, baudrate=cfg.serial.baudrate, **kwargs)

  @property
  def is_connected(self) -> bool:
    return self.io.is_open

  async def setup(self):
    self.io.on_bytes(self._handle_bytes)
    self.io.on_error(self.engine.handle_transport_error)

    if self.wait_for_firmware:
      self._banner = asyncio.get_running_loop().create_future()
    await self.io.setup()

    if self._banner is None:
      return
    try:
      self.firmware_banner = await asyncio.wait_for(self._banner, timeout=self.banner_timeout)
      logger.info("MegaPi connected. Firmware %s", self.firmware_banner)
    except asyncio.TimeoutError:
      logger.warning("No firmware banner within %s s, assuming the board is running",
                     self.banner_timeout)
    finally:
      self._banner = None

  async def stop(self):
    await self.io.stop()
    self.engine.close()

  def _handle_bytes(self, data: bytes) -> None:
    if self._banner is not None and not self._banner.done():
      self._banner.set_result(decode_string(data).strip())
      return
    self.engine.feed(data)

  def send_command(
    self,
    spec: CommandSpec,
    args: ByteArgs = b"",
    **addressing: int,
  ) -> Optional[asyncio.Future]:
    """ Send a catalog command.

    Args:
      spec: the command.
      args: encoded argument bytes.
      addressing: the parameters of the command's identifier formula (`port`, `pin`, `offset`).

    Returns:
      A future for the response value if the command is a query, else `None`.
    """

    identifier = spec.identifier(**addressing)
    return self.engine.invoke(
      identifier=identifier,
      action=spec.action,
      device=spec.device,
      args=args,
      expects_response=spec.expects_response,
    )

  async def query(self, spec: CommandSpec, args: ByteArgs = b"", **addressing: int) -> Value:
    """ Send a query command and wait for its response. Waits forever if none arrives.

    Raises:
      ValueError: if `spec` is not a query. Nothing is sent.
    """

    if not spec.expects_response:
      raise ValueError(f"{spec.name} does not expect a response")
    fut = self.send_command(spec, args, **addressing)
    if fut is None:
      raise ValueError(f"{spec.name} does not expect a response")
    return await fut

  def reset(self) -> None:
    """ Reset all motors and home positions. """
    self.engine.send_payload(RESET_PAYLOAD)

  def serialize(self) -> dict:
    return {
      **super().serialize(),
      "io": self.io.serialize(),
      "wait_for_firmware": self.wait_for_firmware,
      "banner_timeout": self.banner_timeout,
    }
