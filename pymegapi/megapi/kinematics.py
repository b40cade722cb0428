from typing import Tuple

MAX_LINEAR_SPEED = 200


def mecanum_speeds(
  x_speed: float,
  y_speed: float,
  a_speed: float,
  max_linear_speed: float = MAX_LINEAR_SPEED,
) -> Tuple[float, float, float, float]:
  """ Mix a body velocity into the four wheel speeds of a mecanum drive.

  Args:
    x_speed: sideways speed.
    y_speed: forward speed.
    a_speed: angular speed.
    max_linear_speed: if the fastest wheel would exceed this, all wheels are scaled down by the
      same factor so the direction of travel is kept.

  Returns:
    Speeds of the front left, front right, rear left and rear right wheels.
  """

  speeds = (
    y_speed - x_speed + a_speed,
    y_speed + x_speed - a_speed,
    y_speed - x_speed - a_speed,
    y_speed + x_speed + a_speed,
  )
  fastest = max(speeds)
  if fastest > max_linear_speed:
    scale = max_linear_speed / fastest
    speeds = tuple(s * scale for s in speeds)
  return speeds  # type: ignore[return-value]
