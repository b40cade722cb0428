from typing import Sequence

from pymegapi.machines import Machine, need_setup_finished
from pymegapi.megapi import commands
from pymegapi.megapi.backend import MegaPiBackend
from pymegapi.megapi.kinematics import MAX_LINEAR_SPEED, mecanum_speeds
from pymegapi.protocol import Value
from pymegapi.protocol.codec import encode_byte, encode_float, encode_long, encode_short


def _byte_args(*values: int) -> bytes:
  """ Single byte arguments. Each value is wrapped to 0-255. """
  return b"".join(encode_byte(v) for v in values)


class MegaPi(Machine):
  """ Frontend for the Makeblock MegaPi board.

  Write operations return as soon as the command is sent. Read operations wait for the response
  without a timeout; use `asyncio.wait_for` to bound them.

  Reads are correlated with their response by an identifier byte derived from the port (and for some
  sensors the slot or axis). Issuing two reads with the same identifier concurrently, e.g.
  `joystick_read` on both axes of one port, resolves only the later one.

  Example:
    >>> async with MegaPi(backend=MegaPiBackend(port="/dev/ttyAMA0")) as megapi:
    ...   await megapi.dc_motor_run(port=1, speed=100)
    ...   distance = await megapi.ultrasonic_sensor_read(port=6)
  """

  def __init__(self, backend: MegaPiBackend):
    super().__init__(backend=backend)
    self.backend: MegaPiBackend = backend

  @property
  def is_connected(self) -> bool:
    return self.backend.is_connected

  # Pins

  @need_setup_finished
  async def digital_write(self, pin: int, level: int):
    self.backend.send_command(commands.DIGITAL_WRITE, _byte_args(pin, level))

  @need_setup_finished
  async def pwm_write(self, pin: int, pwm: int):
    self.backend.send_command(commands.PWM_WRITE, _byte_args(pin, pwm))

  @need_setup_finished
  async def digital_read(self, pin: int) -> Value:
    return await self.backend.query(commands.DIGITAL_READ, _byte_args(pin), pin=pin)

  @need_setup_finished
  async def analog_read(self, pin: int) -> Value:
    return await self.backend.query(commands.ANALOG_READ, _byte_args(pin + 54), pin=pin)

  # Board

  @need_setup_finished
  async def reset(self):
    """ Reset all motors and home positions. """
    self.backend.reset()

  @need_setup_finished
  async def firmware_version_read(self) -> str:
    version = await self.backend.query(commands.FIRMWARE_VERSION_READ, _byte_args(0), port=0)
    return str(version)

  # Sensors

  @need_setup_finished
  async def ultrasonic_sensor_read(self, port: int) -> Value:
    """ Distance in cm. """
    return await self.backend.query(commands.ULTRASONIC_SENSOR_READ, _byte_args(port), port=port)

  @need_setup_finished
  async def light_sensor_read(self, port: int) -> Value:
    return await self.backend.query(commands.LIGHT_SENSOR_READ, _byte_args(port), port=port)

  @need_setup_finished
  async def sound_sensor_read(self, port: int) -> Value:
    return await self.backend.query(commands.SOUND_SENSOR_READ, _byte_args(port), port=port)

  @need_setup_finished
  async def pir_motion_sensor_read(self, port: int) -> Value:
    return await self.backend.query(commands.PIR_MOTION_SENSOR_READ, _byte_args(port), port=port)

  @need_setup_finished
  async def potentiometer_read(self, port: int) -> Value:
    return await self.backend.query(commands.POTENTIOMETER_READ, _byte_args(port), port=port)

  @need_setup_finished
  async def line_follower_read(self, port: int) -> Value:
    return await self.backend.query(commands.LINE_FOLLOWER_READ, _byte_args(port), port=port)

  @need_setup_finished
  async def limit_switch_read(self, port: int) -> Value:
    return await self.backend.query(commands.LIMIT_SWITCH_READ, _byte_args(port), port=port)

  @need_setup_finished
  async def temperature_read(self, port: int, slot: int) -> Value:
    return await self.backend.query(commands.TEMPERATURE_READ, _byte_args(port, slot), port=port)

  @need_setup_finished
  async def touch_sensor_read(self, port: int) -> Value:
    return await self.backend.query(commands.TOUCH_SENSOR_READ, _byte_args(port), port=port)

  @need_setup_finished
  async def humiture_sensor_read(self, port: int, type_: int) -> Value:
    """ `type_` 0 reads the humidity, 1 the temperature. """
    args = _byte_args(port, type_)
    return await self.backend.query(commands.HUMITURE_SENSOR_READ, args, port=port)

  @need_setup_finished
  async def joystick_read(self, port: int, axis: int) -> Value:
    return await self.backend.query(commands.JOYSTICK_READ, _byte_args(port, axis), port=port)

  @need_setup_finished
  async def gas_sensor_read(self, port: int) -> Value:
    return await self.backend.query(commands.GAS_SENSOR_READ, _byte_args(port), port=port)

  @need_setup_finished
  async def button_read(self, port: int) -> Value:
    return await self.backend.query(commands.BUTTON_READ, _byte_args(port), port=port)

  @need_setup_finished
  async def gyro_read(self, port: int, axis: int) -> Value:
    args = _byte_args(port, axis)
    return await self.backend.query(commands.GYRO_READ, args, port=port, offset=axis)

  # DC motors and servos

  @need_setup_finished
  async def dc_motor_run(self, port: int, speed: float):
    self.backend.send_command(commands.DC_MOTOR_RUN, _byte_args(port) + encode_short(speed))

  async def dc_motor_stop(self, port: int):
    await self.dc_motor_run(port, 0)

  @need_setup_finished
  async def servo_run(self, port: int, slot: int, angle: int):
    self.backend.send_command(commands.SERVO_RUN, _byte_args(port, slot, angle))

  # Encoder motors

  @need_setup_finished
  async def encoder_motor_run(self, slot: int, speed: float):
    args = _byte_args(0x02, slot) + encode_short(speed)
    self.backend.send_command(commands.ENCODER_MOTOR_RUN, args)

  @need_setup_finished
  async def encoder_motor_move(self, slot: int, speed: float, distance: int) -> Value:
    """ Move an encoder motor by `distance` at `speed`. Resolves with the slot once it arrived. """
    args = _byte_args(0x01, slot) + encode_long(distance) + encode_short(speed)
    return await self.backend.query(commands.ENCODER_MOTOR_MOVE, args, port=slot)

  @need_setup_finished
  async def encoder_motor_move_to(self, slot: int, speed: float, position: int) -> Value:
    """ Move an encoder motor to `position` at `speed`. Resolves with the slot once it arrived. """
    args = _byte_args(0x06, slot) + encode_long(position) + encode_short(speed)
    return await self.backend.query(commands.ENCODER_MOTOR_MOVE_TO, args, port=slot)

  @need_setup_finished
  async def encoder_motor_position(self, slot: int) -> Value:
    return await self.backend.query(
      commands.ENCODER_MOTOR_POSITION, _byte_args(0, slot, 1), port=slot, offset=commands.Action.GET
    )

  @need_setup_finished
  async def encoder_motor_speed(self, slot: int) -> Value:
    return await self.backend.query(
      commands.ENCODER_MOTOR_SPEED, _byte_args(0, slot, 2), port=slot, offset=commands.Action.GET
    )

  # Stepper motors

  @need_setup_finished
  async def stepper_motor_run(self, port: int, speed: float):
    self.backend.send_command(commands.STEPPER_MOTOR_RUN, _byte_args(port, 1) + encode_short(speed))

  @need_setup_finished
  async def stepper_motor_move(self, port: int, speed: float, distance: int) -> Value:
    args = _byte_args(port, 2) + encode_short(speed) + encode_long(distance)
    return await self.backend.query(commands.STEPPER_MOTOR_MOVE, args, port=port)

  @need_setup_finished
  async def stepper_motor_move_to(self, port: int, speed: float, position: int) -> Value:
    args = _byte_args(port, 3) + encode_short(speed) + encode_long(position)
    return await self.backend.query(commands.STEPPER_MOTOR_MOVE_TO, args, port=port)

  @need_setup_finished
  async def stepper_motor_setting(self, port: int, microsteps: int, acceleration: int):
    args = _byte_args(port, 4, microsteps) + encode_short(acceleration)
    self.backend.send_command(commands.STEPPER_MOTOR_SETTING, args)

  @need_setup_finished
  async def stepper_motor_position(self, port: int) -> Value:
    return await self.backend.query(
      commands.STEPPER_MOTOR_POSITION, _byte_args(port, 1), port=port, offset=commands.Action.GET
    )

  @need_setup_finished
  async def stepper_motor_speed(self, port: int) -> Value:
    return await self.backend.query(
      commands.STEPPER_MOTOR_SPEED, _byte_args(port, 2), port=port, offset=commands.Action.GET
    )

  # Displays

  @need_setup_finished
  async def rgbled_display(
    self, port: int, slot: int, index: int, red: float, green: float, blue: float
  ):
    args = _byte_args(port, slot, index, int(red), int(green), int(blue))
    self.backend.send_command(commands.RGBLED_DISPLAY, args)

  @need_setup_finished
  async def rgbled_show(self, port: int, slot: int):
    self.backend.send_command(commands.RGBLED_SHOW, _byte_args(port, slot))

  @need_setup_finished
  async def seven_segment_display(self, port: int, value: float):
    args = _byte_args(port) + encode_float(value)
    self.backend.send_command(commands.SEVEN_SEGMENT_DISPLAY, args)

  @need_setup_finished
  async def led_matrix_message(self, port: int, x: int, y: int, message: str):
    """ Show a text on an 8x16 LED matrix, with its top left corner at (x, y). """
    text = bytes(ord(c) & 0xFF for c in message) + b"\x00"
    args = _byte_args(port, 1, x, 7 - y, len(message) + 1) + text
    self.backend.send_command(commands.LED_MATRIX_MESSAGE, args)

  @need_setup_finished
  async def led_matrix_display(self, port: int, x: int, y: int, buffer: Sequence[int]):
    """ Draw raw columns on an LED matrix, one byte per column. """
    args = _byte_args(port, 2, x, 7 - y) + _byte_args(*buffer)
    self.backend.send_command(commands.LED_MATRIX_DISPLAY, args)

  @need_setup_finished
  async def shutter_do(self, port: int, method: int):
    self.backend.send_command(commands.SHUTTER_DO, _byte_args(port, method))

  # Drive

  async def mecanum_run(
    self,
    x_speed: float,
    y_speed: float,
    a_speed: float,
    max_linear_speed: float = MAX_LINEAR_SPEED,
  ):
    """ Drive a mecanum chassis with its wheels on DC motor ports 1, 2, 9 and 10. """
    spd1, spd2, spd3, spd4 = mecanum_speeds(x_speed, y_speed, a_speed, max_linear_speed)
    await self.dc_motor_run(1, spd1)
    await self.dc_motor_run(2, spd2)
    await self.dc_motor_run(9, spd3)
    await self.dc_motor_run(10, -spd4)
