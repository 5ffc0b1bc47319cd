from autopad.core.object import Object
from autopad.core.formula import ELEMENTS, formula_to_vector, vector_to_formula
from autopad.core.dictlist import DictList
from autopad.core.metabolite import Metabolite
from autopad.core.reaction import Reaction
from autopad.core.model import Model
from autopad.core.configuration import Configuration
