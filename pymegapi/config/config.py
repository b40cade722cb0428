import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pymegapi.io.transport import LOG_LEVEL_IO

LOG_FROM_STRING = {
  "IO": LOG_LEVEL_IO,
  "DEBUG": logging.DEBUG,
  "INFO": logging.INFO,
  "WARNING": logging.WARNING,
  "ERROR": logging.ERROR,
  "CRITICAL": logging.CRITICAL,
}

LOG_TO_STRING = {v: k for k, v in LOG_FROM_STRING.items()}


@dataclass
class Config:
  """The configuration object for PyMegaPi."""

  @dataclass
  class Logging:
    """The logging configuration. Level `IO` additionally logs all serial traffic."""

    level: int = logging.INFO
    log_dir: Optional[Path] = None

  @dataclass
  class Serial:
    """The serial link to the board."""

    port: str = "/dev/ttyAMA0"
    baudrate: int = 115200

  logging: Logging = field(default_factory=Logging)
  serial: Serial = field(default_factory=Serial)

  @classmethod
  def from_dict(cls, d: dict) -> "Config":
    logging_data = d.get("logging", {})
    serial_data = d.get("serial", {})
    return cls(
      logging=cls.Logging(
        level=LOG_FROM_STRING[logging_data.get("level", "INFO")],
        log_dir=Path(logging_data["log_dir"]) if logging_data.get("log_dir") else None,
      ),
      serial=cls.Serial(
        port=serial_data.get("port", cls.Serial.port),
        baudrate=int(serial_data.get("baudrate", cls.Serial.baudrate)),
      ),
    )

  @property
  def as_dict(self) -> dict:
    return {
      "logging": {
        "level": LOG_TO_STRING[self.logging.level],
        "log_dir": str(self.logging.log_dir) if self.logging.log_dir is not None else None,
      },
      "serial": {
        "port": self.serial.port,
        "baudrate": self.serial.baudrate,
      },
    }
