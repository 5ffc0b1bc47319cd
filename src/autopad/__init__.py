__author__ = "The autopad development team."
__version__ = "0.1.0"


from autopad.core import (
    ELEMENTS,
    Configuration,
    DictList,
    Metabolite,
    Model,
    Object,
    Reaction,
)
from autopad import exceptions
from autopad import manipulation
from autopad import ph
from autopad.ph import AdjustmentReport, PKaLookup, adjust_ph, build_pka_table
from autopad.util import show_versions
