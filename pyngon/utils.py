from typing import TypeAlias
from numpy.typing import NDArray
import numpy as np

INVALID = -1
SCALAR_MAX = float(np.finfo(np.float64).max)
Vec3d: TypeAlias = tuple[float, float, float] | NDArray[np.floating]
Chord: TypeAlias = tuple[int, int]
