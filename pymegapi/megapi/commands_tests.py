import unittest

from pymegapi.megapi import commands
from pymegapi.megapi.commands import (
  CATALOG,
  Action,
  Device,
  analog_pin_id,
  offset_port_id,
  pin_id,
  port_id,
  zero_id,
)


class IdentifierFormulaTests(unittest.TestCase):
  def test_zero_id(self):
    self.assertEqual(zero_id(Device.DC_MOTOR), 0)

  def test_pin_ids(self):
    self.assertEqual(pin_id(Device.DIGITAL, 13), 13)
    self.assertEqual(analog_pin_id(Device.ANALOG, 0), 54)
    self.assertEqual(analog_pin_id(Device.ANALOG, 15), 69)

  def test_port_id(self):
    self.assertEqual(port_id(Device.ULTRASONIC_SENSOR, 6), 0x61)
    self.assertEqual(port_id(Device.VERSION, 0), 0)
    self.assertEqual(port_id(Device.ENCODER_MOTOR, 1), 0x4E)

  def test_offset_port_id(self):
    self.assertEqual(offset_port_id(Device.GYRO, 0, 1), 0x16)
    self.assertEqual(offset_port_id(Device.ENCODER_BOARD, 1, Action.GET), 0x5D)

  def test_identifiers_are_single_bytes(self):
    self.assertEqual(port_id(Device.GAS_SENSOR, 16), 25)
    self.assertEqual(offset_port_id(Device.STEPPER_MOTOR, 15, 1), 0x3E)

  def test_colliding_identifiers(self):
    # The protocol cannot tell these apart: they must not be in flight at the same time.
    self.assertEqual(
      commands.LIGHT_SENSOR_READ.identifier(port=1), commands.DIGITAL_READ.identifier(pin=0x13)
    )
    self.assertEqual(
      commands.PIR_MOTION_SENSOR_READ.identifier(port=7),
      commands.TOUCH_SENSOR_READ.identifier(port=7),
    )
    self.assertEqual(
      commands.GYRO_READ.identifier(port=1, offset=2), commands.GYRO_READ.identifier(port=2, offset=1)
    )


class CatalogTests(unittest.TestCase):
  def test_catalog_names(self):
    for name, spec in CATALOG.items():
      self.assertEqual(spec.name, name)

  def test_reads_expect_responses(self):
    for spec in CATALOG.values():
      if spec.action == Action.GET:
        self.assertTrue(spec.expects_response, spec.name)

  def test_writes_use_identifier_zero(self):
    for spec in CATALOG.values():
      if not spec.expects_response:
        self.assertEqual(spec.identifier(), 0, spec.name)

  def test_moves_expect_completion(self):
    for spec in (
      commands.ENCODER_MOTOR_MOVE,
      commands.ENCODER_MOTOR_MOVE_TO,
      commands.STEPPER_MOTOR_MOVE,
      commands.STEPPER_MOTOR_MOVE_TO,
    ):
      self.assertEqual(spec.action, Action.RUN)
      self.assertTrue(spec.expects_response)

  def test_identifier(self):
    self.assertEqual(commands.ULTRASONIC_SENSOR_READ.identifier(port=6), 0x61)
    self.assertEqual(commands.DIGITAL_READ.identifier(pin=30), 30)
    self.assertEqual(commands.ENCODER_MOTOR_POSITION.identifier(port=1, offset=Action.GET), 0x5D)

  def test_reset_payload(self):
    self.assertEqual(commands.RESET_PAYLOAD, b"\x00\x04")

  def test_shared_device_codes(self):
    self.assertEqual(commands.TOUCH_SENSOR_READ.device, commands.PIR_MOTION_SENSOR_READ.device)
    self.assertNotIn("PIR_MOTION_SENSOR", repr(commands.TOUCH_SENSOR_READ))
    self.assertEqual(commands.STEPPER_MOTOR_MOVE.device, commands.ENCODER_MOTOR_MOVE.device)
    self.assertNotIn("ENCODER_MOTOR", repr(commands.STEPPER_MOTOR_MOVE))
