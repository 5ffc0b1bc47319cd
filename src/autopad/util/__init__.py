from autopad.util.context import HistoryManager, atomic, get_context, set_reversibly
from autopad.util.process_pool import ProcessPool
from autopad.util.util import show_versions
from autopad.util.array import create_element_matrix, create_stoichiometric_matrix
