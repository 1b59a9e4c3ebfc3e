# Copyright 2025 Zhiyuan Yu (Heemskerk's lab, University of Michigan)
DEFAULT_NU = 2
DEFAULT_R = 0.0
DEFAULT_MAX_DIMENSION = 1
DEFAULT_NUM_DIVISIONS = 1000
DEFAULT_RADIUS_POLICY = "argmin_witness"

# integer codes understood by the jitted witness scan
RADIUS_POLICY_CODES = {
    "argmin_witness": 0,
    "last_witness": 1,
    "min_witness": 2,
}
