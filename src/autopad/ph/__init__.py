from .adjust import adjust_ph
from .balance import (
    StoichiometryEdit,
    apply_stoichiometry_edits,
    balance_edits,
    balance_reaction,
    charge_imbalanced,
)
from .compartments import (
    NAMING_CONVENTIONS,
    CompartmentAssignment,
    NamingConvention,
    detect_convention,
    resolve_compartments,
)
from .pka import PKaLookup, build_pka_table
from .protonation import (
    align_ph,
    align_pka_table,
    protonation_ordinal,
    proton_deltas,
    sort_pka,
)
from .protons import (
    PROTON_SPELLINGS,
    ProtonPoolPlan,
    apply_proton_pool_plan,
    is_proton_stem,
    locate_proton_pools,
)
from .reformulation import (
    FormulaEdit,
    adjust_vector,
    apply_formula_edits,
    compute_formula_edits,
    reformulate,
)
from .report import AdjustmentReport
from .topology import (
    DECISION_TABLE,
    Classification,
    ReactionProfile,
    Topology,
    classify,
    classify_reactions,
    complex_imbalance_flags,
    profile_reaction,
)
