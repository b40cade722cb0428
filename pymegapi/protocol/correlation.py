import logging
import threading
from typing import Callable, Dict, Optional

from pymegapi.protocol.codec import Value

logger = logging.getLogger(__name__)

Resolver = Callable[[Optional[Value]], None]

IDENTIFIER_COUNT = 256


def _check_identifier(identifier: int) -> None:
  if not 0 <= identifier < IDENTIFIER_COUNT:
    raise ValueError(f"Identifier must be a single byte (0-255), got {identifier}")


class CorrelationTable:
  """ Maps the identifier of an in-flight query to the one caller waiting for its response.

  The identifier byte is the only correlation key the protocol has. There is room for one pending
  caller per identifier: registering under an identifier that is already pending replaces the
  earlier caller, which is then never resolved. Two concurrent queries that share an identifier
  therefore cannot be told apart, and the response to either resolves whoever registered last.

  Entries never expire. A caller whose response is lost stays registered until `clear` is called.
  """

  def __init__(self):
    self._resolvers: Dict[int, Resolver] = {}
    self._lock = threading.Lock()

  def register(self, identifier: int, resolver: Resolver) -> None:
    _check_identifier(identifier)
    with self._lock:
      self._resolvers[identifier] = resolver

  def resolve(self, identifier: int, value: Optional[Value]) -> bool:
    """ Pop the resolver registered under `identifier` and call it with `value`.

    Returns:
      Whether a resolver was registered. A response nobody waits for is silently dropped.
    """

    with self._lock:
      resolver = self._resolvers.pop(identifier, None)
    if resolver is None:
      logger.debug("No pending caller for identifier 0x%02X, dropping %r", identifier, value)
      return False
    resolver(value)
    return True

  def is_pending(self, identifier: int) -> bool:
    with self._lock:
      return identifier in self._resolvers

  def clear(self) -> None:
    with self._lock:
      self._resolvers.clear()

  def __len__(self) -> int:
    with self._lock:
      return len(self._resolvers)
