# main.py : armillary sphere engine API (angles, bodies, phase, rise/set per frame)
import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from armillary.core import settings
from armillary.core.engine import compute_sphere_state
from armillary.core.ephemeris import default_provider
from armillary.core.models import RiseSetReq, RiseSetResp, SphereReq, SphereResp, ZodiacResp
from armillary.core.riseset import RiseSetCache
from armillary.core.values import GeoLocation, Instant, SphereState
from armillary.core.zodiac import SIGN_NAMES, to_zodiac_string, zodiac_position

logging.basicConfig(level=settings.LOG_LEVEL)

# -------------------------------------------------
# App
# -------------------------------------------------
app = FastAPI(title="Armillary Sphere Engine", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# one viewport per process in practice; bump ARMILLARY_RISESET_CACHE_SIZE for more
_RISESET_CACHE = RiseSetCache()

# -------------------------------------------------
# ✅ Startup warm-up (loads the ephemeris before the first frame)
# -------------------------------------------------
@app.on_event("startup")
def _startup_warm():
    try:
        now = datetime.now(timezone.utc)
        day = now.timetuple().tm_yday
        instant = Instant(now.year, day, now.hour * 60 + now.minute)
        compute_sphere_state(instant, GeoLocation(0.0, 0.0), include_rise_set=False)
        print(f"[STARTUP] warm ok ({default_provider().name})", flush=True)
    except Exception as e:
        print(f"[STARTUP] warm fail: {e}", flush=True)

# -------------------------------------------------
# Health / Debug
# -------------------------------------------------
@app.get("/health")
def health():
    return {"ok": True, "service": "armillary", "ephemeris": default_provider().name}

@app.get("/debug/routes")
def debug_routes():
    return [r.path for r in app.routes]

# -------------------------------------------------
# Utilities
# -------------------------------------------------
def _state_to_dict(state: SphereState) -> Dict[str, Any]:
    rs = state.rise_set
    earth = state.earth
    return {
        "julianDate": state.julian_date,
        "lstDeg": state.lst_deg,
        "lstTime": state.lst_time,
        "obliquityRad": state.obliquity_rad,
        "angles": state.angles.as_dict(),
        "sunLonRad": state.sun_lon_rad,
        "moon": {"longitude": state.moon.longitude, "latitude": state.moon.latitude},
        "lunarPhase": {"phase": state.lunar_phase.name, "illumination": state.lunar_phase.illumination},
        "lunarNodes": {"ascending": state.lunar_nodes.ascending, "descending": state.lunar_nodes.descending},
        "ayanamshaDeg": state.ayanamsha_deg,
        "planets": [
            {
                "name": p.name,
                "geocentricLongitude": p.geocentric_longitude,
                "geocentricLatitude": p.geocentric_latitude,
                "heliocentricLongitude": p.heliocentric_longitude,
                "heliocentricLatitude": p.heliocentric_latitude,
                "heliocentricDistance": p.heliocentric_distance,
            }
            for p in state.planets.values()
        ],
        "zodiac": state.zodiac,
        "riseSet": {"sunrise": rs.sunrise, "sunset": rs.sunset, "transit": rs.transit} if rs else None,
        "planetaryNodes": {
            name: {"ascending": n.ascending, "descending": n.descending}
            for name, n in state.planetary_nodes.items()
        },
        "planetaryApsides": {
            name: {
                "perihelion": a.perihelion,
                "aphelion": a.aphelion,
                "perihelionDistance": a.perihelion_distance,
                "aphelionDistance": a.aphelion_distance,
            }
            for name, a in state.planetary_apsides.items()
        },
        "earth": {"longitude": earth.longitude, "latitude": earth.latitude, "distance": earth.distance},
        "lunarPerigeeDeg": state.lunar_perigee_deg,
    }

# -------------------------------------------------
# Sphere state (one call per UI update)
# -------------------------------------------------
@app.post("/api/sphere/state", response_model=SphereResp)
def sphere_state(req: SphereReq):
    try:
        instant = Instant(req.year, req.dayOfYear, req.minutesUTC)
        location = GeoLocation(req.latitude, req.longitude)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    state = compute_sphere_state(
        instant,
        location,
        sidereal=req.sidereal,
        timezone=req.timezone,
        rise_set_cache=_RISESET_CACHE,
        include_planets=req.includePlanets,
        include_rise_set=req.includeRiseSet,
    )
    return _state_to_dict(state)

# -------------------------------------------------
# Rise / set (✅ cached per day + place + tz)
# -------------------------------------------------
@app.post("/api/sphere/riseset", response_model=RiseSetResp)
def sphere_riseset(req: RiseSetReq):
    try:
        Instant(req.year, req.dayOfYear, 0.0)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    rs = _RISESET_CACHE.get_or_compute(req.latitude, req.longitude, req.dayOfYear, req.year, req.timezone)
    return {"sunrise": rs.sunrise, "sunset": rs.sunset, "transit": rs.transit}

# -------------------------------------------------
# Zodiac formatting
# -------------------------------------------------
@app.get("/api/zodiac/{longitude}", response_model=ZodiacResp)
def zodiac(longitude: float):
    if not math.isfinite(longitude):
        raise HTTPException(status_code=400, detail="longitude must be finite")
    pos = zodiac_position(longitude)
    return {
        "longitude": longitude,
        "zodiac": to_zodiac_string(longitude),
        "sign": SIGN_NAMES[pos.sign_index],
        "signIndex": pos.sign_index,
        "degrees": pos.degrees,
        "minutes": pos.minutes,
    }
