from .backend import MachineBackend
from .machine import Machine, need_setup_finished
