# sinewave/core/common_types.py

import numpy as np
import quaternion  # numpy-quaternion, registers np.quaternion

# 3-component float vector (x, y, z)
Vector3D = np.ndarray

# Unit quaternion (w, x, y, z)
Quaternion = np.quaternion
