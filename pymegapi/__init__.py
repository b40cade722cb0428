import datetime
import logging
from pathlib import Path
from typing import Optional, Union

from pymegapi.__version__ import __version__
from pymegapi.config import Config, load_config

CONFIG_FILE_NAME = "pymegapi"

CONFIG = load_config(CONFIG_FILE_NAME, create_default=False)


def project_root() -> Path:
  """
  Get the root directory of the project.
  From https://stackoverflow.com/a/53465812
  Returns:
    The root directory of the project.
  """
  return Path(__file__).parent.parent


def setup_logger(log_dir: Optional[Union[Path, str]], level: int):
  """
  Set up the logger for pymegapi. If the log_dir does not exist, it will be created.

  Args:
    log_dir: The directory to store the log files. If None, no log files will be created.
    level: The logging level. Use `pymegapi.io.LOG_LEVEL_IO` to also log serial traffic.
  """
  # Create a logger
  if log_dir is not None:
    if isinstance(log_dir, str):
      log_dir = Path(log_dir)
    if not log_dir.exists():
      log_dir.mkdir(parents=True)
  logger = logging.getLogger("pymegapi")
  logger.setLevel(level)

  now = datetime.datetime.now().strftime("%Y%m%d")
  # remove file handlers that were added before
  for handler in list(logger.handlers):
    logger.removeHandler(handler)
    handler.close()

  # Add a file handler, if log_dir is not None
  if log_dir is not None:
    fh = logging.FileHandler(log_dir / f"pymegapi-{now}.log")
    fh.setLevel(logging.NOTSET)  # logs everything it receives, but the logger level can filter
    fh.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    logger.addHandler(fh)


def configure(cfg: Config):
  """Configure pymegapi."""
  setup_logger(cfg.logging.log_dir, cfg.logging.level)


configure(CONFIG)

from pymegapi.megapi import MegaPi, MegaPiBackend  # pylint: disable=wrong-import-position
