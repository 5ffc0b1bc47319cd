"""Provide a global configuration object."""


import logging
from os import cpu_count
from textwrap import dedent
from typing import Dict


__all__ = ("Configuration",)


logger = logging.getLogger(__name__)


class Singleton(type):
    """Meta class handing out one shared instance per class."""

    _instances: Dict[type, object] = {}

    def __call__(cls, *args, **kwargs):
        if cls not in Singleton._instances:
            Singleton._instances[cls] = super().__call__(*args, **kwargs)
        return Singleton._instances[cls]


class Configuration(metaclass=Singleton):
    """
    Define a global configuration object.

    The attributes of this singleton object are used as default values by
    autopad functions.

    Attributes
    ----------
    tolerance : float
        Absolute threshold below which an element imbalance is treated as
        zero when deciding whether a reaction has a complex (non-hydrogen)
        imbalance (default 1E-09).
    processes : int > 0
        A default number of processes to use where multiprocessing is
        possible. The default number corresponds to the number of available
        cores (hyperthreads) minus one.
    proton_stem : str
        The identifier stem used for synthesized proton metabolites
        (default "h").

    """

    def __init__(self, **kwargs) -> None:
        """Initialize the configuration with its default attribute values."""
        super().__init__(**kwargs)
        self.tolerance = 1e-09
        self.processes = None
        self.proton_stem = "h"
        self._set_default_processes()

    def _set_default_processes(self) -> None:
        """Set the default number of processes."""
        self.processes = cpu_count()
        if self.processes is None:
            logger.warning("The number of cores could not be detected - assuming one.")
            self.processes = 1
        if self.processes > 1:
            self.processes -= 1

    def __repr__(self) -> str:
        """Return a string representation of the current configuration values."""
        return dedent(
            f"""
            tolerance: {self.tolerance}
            processes: {self.processes}
            proton_stem: {self.proton_stem}
            """
        )
