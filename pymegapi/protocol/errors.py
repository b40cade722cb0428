class ProtocolError(Exception):
  """ Base class for errors in the MegaPi serial protocol. """


class MalformedFrameError(ProtocolError):
  """ A response frame whose contents could not be interpreted, e.g. a truncated value region. """


class MalformedValueError(ProtocolError, ValueError):
  """ Fewer value bytes were supplied than the value type requires. """


class UnsupportedTypeTagError(ProtocolError):
  """ A response frame carried a type tag this driver does not decode. """

  def __init__(self, type_tag: int):
    super().__init__(f"Unsupported data type {type_tag}")
    self.type_tag = type_tag
