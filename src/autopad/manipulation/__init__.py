from .validate import check_mass_balance, mass_charge_imbalance
