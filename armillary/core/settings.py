# armillary/core/settings.py
import os

# "analytic" (offline series, default) or "skyfield" (JPL kernel)
EPHEMERIS_BACKEND = os.getenv("ARMILLARY_EPHEMERIS", "analytic").strip().lower()

# "laskar" (ten-term series, default) or "iau1980" (Meeus cubic)
OBLIQUITY_MODEL = os.getenv("ARMILLARY_OBLIQUITY_MODEL", "laskar").strip().lower()

# JPL kernel for the skyfield backend
DE_FILE = os.getenv("ARMILLARY_DE_FILE", "de440s.bsp")

# None -> skyfield's own default directory
SKYFIELD_DIR = os.getenv("ARMILLARY_SKYFIELD_DIR") or None

# 1 == single-slot "last computed" memo
RISESET_CACHE_SIZE = max(1, int(os.getenv("ARMILLARY_RISESET_CACHE_SIZE", "1")))

LOG_LEVEL = os.getenv("ARMILLARY_LOG_LEVEL", "INFO").upper()
