# photon_pool.py

import constants


class PhotonPool:
    """
    A bounded pool of retired photons, reused to avoid allocation churn in the
    per-frame create/retire loop.

    Data Contract:
    - Inputs:
        - photon_type (type): RGBPhoton or FilteredPhoton. Must provide
          `reinitialize(*fields)` taking the same fields as its constructor.
        - default_fields (tuple): constructor fields used to pre-fill the pool.
        - max_size (int): capacity. Photons released into a full pool are dropped.
        - initial_size (int): number of photons allocated up front.
    - Invariants: 0 <= size <= max_size. A pool belongs to exactly one beam.
    """
    def __init__(self, photon_type, default_fields: tuple, max_size: int = constants.PHOTON_POOL_SIZE, initial_size: int = 0):
        self.photon_type = photon_type
        self.max_size = max_size
        self._free = [photon_type(*default_fields) for _ in range(min(initial_size, max_size))]
        self.allocations = 0

    @property
    def size(self) -> int:
        return len(self._free)

    def acquire(self, *fields):
        """
        Returns a photon with every field set from `fields`, recycled when one
        is available, freshly allocated otherwise.
        """
        if self._free:
            return self._free.pop().reinitialize(*fields)
        self.allocations += 1
        return self.photon_type(*fields)

    def release(self, photon):
        if len(self._free) < self.max_size:
            self._free.append(photon)
