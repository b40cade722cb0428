from .backend import MegaPiBackend
from .commands import CATALOG, Action, CommandSpec, Device
from .kinematics import mecanum_speeds
from .megapi import MegaPi
