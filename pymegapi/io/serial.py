import asyncio
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import serial

from pymegapi.io.errors import TransportClosedError
from pymegapi.io.transport import LOG_LEVEL_IO, Transport

logger = logging.getLogger(__name__)


class Serial(Transport):
  """Serial port transport built on pyserial.

  The port is opened with `serial.serial_for_url`, so plain device paths (`/dev/ttyAMA0`, `COM3`)
  as well as pyserial URLs (`loop://`, `socket://host:port`) are accepted. A background thread reads
  from the port and hands every chunk to the event loop that ran `setup`.
  """

  def __init__(
    self,
    port: str,
    baudrate: int = 115200,
    bytesize: int = 8,  # serial.EIGHTBITS
    parity: str = "N",  # serial.PARITY_NONE
    stopbits: int = 1,  # serial.STOPBITS_ONE
    write_timeout: Optional[float] = 1,
    read_timeout: float = 0.05,
  ):
    super().__init__()
    self._port = port
    self.baudrate = baudrate
    self.bytesize = bytesize
    self.parity = parity
    self.stopbits = stopbits
    self.write_timeout = write_timeout
    self.read_timeout = read_timeout
    self._ser: Optional[serial.SerialBase] = None
    self._executor: Optional[ThreadPoolExecutor] = None
    self._loop: Optional[asyncio.AbstractEventLoop] = None
    self._reading_thread: Optional[threading.Thread] = None
    self._stop_reading = threading.Event()

  @property
  def port(self) -> str:
    return self._port

  @property
  def is_open(self) -> bool:
    return self._ser is not None and self._ser.is_open

  async def setup(self):
    self._loop = asyncio.get_running_loop()
    self._executor = ThreadPoolExecutor(max_workers=1)

    def _open_serial() -> serial.SerialBase:
      return serial.serial_for_url(
        self._port,
        baudrate=self.baudrate,
        bytesize=self.bytesize,
        parity=self.parity,
        stopbits=self.stopbits,
        write_timeout=self.write_timeout,
        timeout=self.read_timeout,
      )

    try:
      self._ser = await self._loop.run_in_executor(self._executor, _open_serial)
    except serial.SerialException as e:
      logger.error("Could not open serial port %s, is it in use by a different process?", self._port)
      self._executor.shutdown(wait=True)
      self._executor = None
      raise e

    self._stop_reading.clear()
    self._reading_thread = threading.Thread(
      target=self._continuously_read, name=f"pymegapi-serial-{self._port}", daemon=True
    )
    self._reading_thread.start()

  async def stop(self):
    self._stop_reading.set()
    loop = asyncio.get_running_loop()
    if self._reading_thread is not None:
      await loop.run_in_executor(None, self._reading_thread.join)
      self._reading_thread = None
    if self._ser is not None and self._ser.is_open:
      if self._executor is None:
        raise RuntimeError("Call setup() first.")
      await loop.run_in_executor(self._executor, self._ser.close)
    if self._executor is not None:
      self._executor.shutdown(wait=True)
      self._executor = None

  def send(self, data: bytes) -> None:
    if self._ser is None or not self._ser.is_open:
      raise TransportClosedError(f"Cannot write to serial port {self._port}: port is not open")
    self._ser.write(data)
    logger.log(LOG_LEVEL_IO, "[%s] send %s", self._port, data.hex(" "))

  def _continuously_read(self) -> None:
    """Read from the port until `stop` is called or the port fails.

    Chunks are handed to the event loop with `call_soon_threadsafe`, so they are processed one at a
    time and in arrival order on the loop thread.
    """

    assert self._ser is not None and self._loop is not None
    logger.debug("[%s] starting reading thread", self._port)

    while not self._stop_reading.is_set():
      try:
        data = self._ser.read(max(1, self._ser.in_waiting))
      except (serial.SerialException, OSError) as e:
        if self._stop_reading.is_set():
          break
        logger.error("[%s] serial port error: %s", self._port, e)
        self._loop.call_soon_threadsafe(self._report_error, e)
        break

      if not data:
        continue
      logger.log(LOG_LEVEL_IO, "[%s] read %s", self._port, data.hex(" "))
      self._loop.call_soon_threadsafe(self._deliver, bytes(data))

    logger.debug("[%s] reading thread stopped", self._port)

  def serialize(self):
    return {
      **super().serialize(),
      "port": self._port,
      "baudrate": self.baudrate,
      "bytesize": self.bytesize,
      "parity": self.parity,
      "stopbits": self.stopbits,
      "write_timeout": self.write_timeout,
      "read_timeout": self.read_timeout,
    }

  @classmethod
  def deserialize(cls, data: dict) -> "Serial":
    return cls(
      port=data["port"],
      baudrate=data["baudrate"],
      bytesize=data["bytesize"],
      parity=data["parity"],
      stopbits=data["stopbits"],
      write_timeout=data["write_timeout"],
      read_timeout=data["read_timeout"],
    )
