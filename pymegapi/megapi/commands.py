"""The MegaPi command catalog.

Every command the board understands is a `CommandSpec`: a device code, an action code, and the
formula computing the identifier byte from the addressing parameters (port, slot, axis, ...). The
identifier is echoed back in the response and is the only thing that ties a response to its query,
so queries whose formulas produce the same byte must not be in flight at the same time.
"""

import enum
from dataclasses import dataclass
from typing import Callable


class Action(enum.IntEnum):
  GET = 1
  RUN = 2
  RESET = 4


class Device:
  """ Device codes. Some devices share a code, so these are plain ints rather than an enum. """

  VERSION = 0
  ULTRASONIC_SENSOR = 1
  TEMPERATURE_SENSOR = 2
  LIGHT_SENSOR = 3
  POTENTIOMETER = 4
  JOYSTICK = 5
  GYRO = 6
  SOUND_SENSOR = 7
  RGBLED = 8
  SEVEN_SEGMENT = 9
  DC_MOTOR = 10
  SERVO = 11
  PIR_MOTION_SENSOR = 15
  TOUCH_SENSOR = 15
  LINE_FOLLOWER = 17
  SHUTTER = 20
  LIMIT_SWITCH = 21
  BUTTON = 22
  HUMITURE_SENSOR = 23
  GAS_SENSOR = 25
  DIGITAL = 0x1E
  ANALOG = 0x1F
  PWM = 0x20
  LED_MATRIX = 41
  ENCODER_BOARD = 61
  ENCODER_MOTOR = 62
  STEPPER_MOTOR = 62


# Identifier formulas. All take the device code first, then the addressing parameters.


def zero_id(device: int) -> int:
  """ Fire-and-forget commands all use identifier 0. """
  return 0


def pin_id(device: int, pin: int) -> int:
  return pin & 0xFF


def analog_pin_id(device: int, pin: int) -> int:
  """ Analog pins are addressed after the 54 digital pins of the ATmega2560. """
  return (pin + 54) & 0xFF


def port_id(device: int, port: int) -> int:
  return ((port << 4) + device) & 0xFF


def offset_port_id(device: int, port: int, offset: int) -> int:
  return (((port + offset) << 4) + device) & 0xFF


@dataclass(frozen=True)
class CommandSpec:
  name: str
  device: int
  action: Action
  id_formula: Callable[..., int]
  expects_response: bool = False

  def identifier(self, **addressing: int) -> int:
    return self.id_formula(self.device, **addressing)


def _write(name: str, device: int) -> CommandSpec:
  return CommandSpec(name=name, device=device, action=Action.RUN, id_formula=zero_id)


def _read(name: str, device: int, id_formula: Callable[..., int] = port_id) -> CommandSpec:
  return CommandSpec(
    name=name, device=device, action=Action.GET, id_formula=id_formula, expects_response=True
  )


DIGITAL_WRITE = _write("digital_write", Device.DIGITAL)
PWM_WRITE = _write("pwm_write", Device.PWM)
DIGITAL_READ = _read("digital_read", Device.DIGITAL, pin_id)
ANALOG_READ = _read("analog_read", Device.ANALOG, analog_pin_id)

FIRMWARE_VERSION_READ = _read("firmware_version_read", Device.VERSION)
ULTRASONIC_SENSOR_READ = _read("ultrasonic_sensor_read", Device.ULTRASONIC_SENSOR)
LIGHT_SENSOR_READ = _read("light_sensor_read", Device.LIGHT_SENSOR)
SOUND_SENSOR_READ = _read("sound_sensor_read", Device.SOUND_SENSOR)
PIR_MOTION_SENSOR_READ = _read("pir_motion_sensor_read", Device.PIR_MOTION_SENSOR)
POTENTIOMETER_READ = _read("potentiometer_read", Device.POTENTIOMETER)
LINE_FOLLOWER_READ = _read("line_follower_read", Device.LINE_FOLLOWER)
LIMIT_SWITCH_READ = _read("limit_switch_read", Device.LIMIT_SWITCH)
TEMPERATURE_READ = _read("temperature_read", Device.TEMPERATURE_SENSOR)
TOUCH_SENSOR_READ = _read("touch_sensor_read", Device.TOUCH_SENSOR)
HUMITURE_SENSOR_READ = _read("humiture_sensor_read", Device.HUMITURE_SENSOR)
JOYSTICK_READ = _read("joystick_read", Device.JOYSTICK)
GAS_SENSOR_READ = _read("gas_sensor_read", Device.GAS_SENSOR)
BUTTON_READ = _read("button_read", Device.BUTTON)
GYRO_READ = _read("gyro_read", Device.GYRO, offset_port_id)

DC_MOTOR_RUN = _write("dc_motor_run", Device.DC_MOTOR)
SERVO_RUN = _write("servo_run", Device.SERVO)

ENCODER_MOTOR_RUN = _write("encoder_motor_run", Device.ENCODER_MOTOR)
ENCODER_MOTOR_MOVE = CommandSpec(
  "encoder_motor_move", Device.ENCODER_MOTOR, Action.RUN, port_id, expects_response=True
)
ENCODER_MOTOR_MOVE_TO = CommandSpec(
  "encoder_motor_move_to", Device.ENCODER_MOTOR, Action.RUN, port_id, expects_response=True
)
ENCODER_MOTOR_POSITION = _read("encoder_motor_position", Device.ENCODER_BOARD, offset_port_id)
ENCODER_MOTOR_SPEED = _read("encoder_motor_speed", Device.ENCODER_BOARD, offset_port_id)

STEPPER_MOTOR_RUN = _write("stepper_motor_run", Device.STEPPER_MOTOR)
STEPPER_MOTOR_MOVE = CommandSpec(
  "stepper_motor_move", Device.STEPPER_MOTOR, Action.RUN, port_id, expects_response=True
)
STEPPER_MOTOR_MOVE_TO = CommandSpec(
  "stepper_motor_move_to", Device.STEPPER_MOTOR, Action.RUN, port_id, expects_response=True
)
STEPPER_MOTOR_SETTING = _write("stepper_motor_setting", Device.STEPPER_MOTOR)
STEPPER_MOTOR_POSITION = _read("stepper_motor_position", Device.STEPPER_MOTOR, offset_port_id)
STEPPER_MOTOR_SPEED = _read("stepper_motor_speed", Device.STEPPER_MOTOR, offset_port_id)

RGBLED_DISPLAY = _write("rgbled_display", Device.RGBLED)
RGBLED_SHOW = _write("rgbled_show", Device.RGBLED)
SEVEN_SEGMENT_DISPLAY = _write("seven_segment_display", Device.SEVEN_SEGMENT)
LED_MATRIX_MESSAGE = _write("led_matrix_message", Device.LED_MATRIX)
LED_MATRIX_DISPLAY = _write("led_matrix_display", Device.LED_MATRIX)
SHUTTER_DO = _write("shutter_do", Device.SHUTTER)

# The board reset has no identifier/action/device layout: its payload is just [0, 4].
RESET_PAYLOAD = bytes([0, Action.RESET])

CATALOG = {
  spec.name: spec
  for spec in (
    DIGITAL_WRITE, PWM_WRITE, DIGITAL_READ, ANALOG_READ, FIRMWARE_VERSION_READ,
    ULTRASONIC_SENSOR_READ, LIGHT_SENSOR_READ, SOUND_SENSOR_READ, PIR_MOTION_SENSOR_READ,
    POTENTIOMETER_READ, LINE_FOLLOWER_READ, LIMIT_SWITCH_READ, TEMPERATURE_READ,
    TOUCH_SENSOR_READ, HUMITURE_SENSOR_READ, JOYSTICK_READ, GAS_SENSOR_READ, BUTTON_READ,
    GYRO_READ, DC_MOTOR_RUN, SERVO_RUN, ENCODER_MOTOR_RUN, ENCODER_MOTOR_MOVE,
    ENCODER_MOTOR_MOVE_TO, ENCODER_MOTOR_POSITION, ENCODER_MOTOR_SPEED, STEPPER_MOTOR_RUN,
    STEPPER_MOTOR_MOVE, STEPPER_MOTOR_MOVE_TO, STEPPER_MOTOR_SETTING, STEPPER_MOTOR_POSITION,
    STEPPER_MOTOR_SPEED, RGBLED_DISPLAY, RGBLED_SHOW, SEVEN_SEGMENT_DISPLAY, LED_MATRIX_MESSAGE,
    LED_MATRIX_DISPLAY, SHUTTER_DO,
  )
}
