from .schedule import ReelOutSchedule, SegmentParameters
from .topology import TetherState, straight_tether
from .forces import (
    SegmentForces,
    TetherForceModel,
    compute_segment_forces,
    hard_tension,
    node_accelerations,
    softplus_tension,
)
