"""Parameters for motion marker visualization and leg kinematics."""

import numpy as np

gravity_constant = 9.81  # m/s^2

# ----------------------------------------------------------------------------------------------------------------
# Visualization
# ----------------------------------------------------------------------------------------------------------------
# Each namespace either has a fixed 'capacity' (discrete channels, one marker per phase/foothold) or a sampling
# interval 'dt' (continuous channels, padded with deletions up to 'deletion_horizon').
visualization_params = {
    'frame_id': 'world',
    'deletion_horizon': 10.0,  # seconds
    'namespaces': {
        'support_polygons': {'capacity': 30, 'marker_size': 1.0},
        'footholds': {'capacity': 80, 'marker_size': 0.04},
        'start_stance': {'capacity': 80, 'marker_size': 0.04},
        'body': {'dt': 0.01, 'marker_size': 0.011},
        'zmp': {'dt': 0.1, 'marker_size': 0.011},
        'start': {'capacity': 1, 'marker_size': 0.02},
    },
    'support_polygon_alpha': 0.15,
    'support_line_width': 0.02,
}

# ----------------------------------------------------------------------------------------------------------------
# Robot (HyQ leg geometry)
# ----------------------------------------------------------------------------------------------------------------
robot_params = {
    'thigh_length': 0.35,
    'shank_length': 0.33,
    'hfe_to_haa_z': 0.08,
    # Single-limb robot: base frame sits 0.15m below the hip
    'single_leg_hip_offset': np.array([0.0, 0.0, 0.15]),
    # Quadruped: offsets added to base-frame foot positions to express them in the hip frame
    'hip_offsets': {
        'LF': np.array([-0.3735, -0.207, 0.0]),
        'RF': np.array([-0.3735, 0.207, 0.0]),
        'LH': np.array([0.3735, -0.207, 0.0]),
        'RH': np.array([0.3735, 0.207, 0.0]),
    },
}
