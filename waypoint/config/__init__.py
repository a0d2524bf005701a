"""
Declarative configuration: nested-mapping state tables, YAML/JSON machine
definitions and the registry that resolves callback names.
"""

from .loader import CallbackRegistry, MachineConfig, build_machine, load_machine_config, load_state_table

__all__ = ["CallbackRegistry", "MachineConfig", "build_machine", "load_machine_config", "load_state_table"]
