# armillary/core/models.py
from pydantic import BaseModel, Field
from typing import Optional, Dict, List


class SphereReq(BaseModel):
    dayOfYear: int = Field(..., ge=1, le=366, description="UTC day of year (1..365/366)")
    year: int = Field(..., description="Full year, proleptic Gregorian")
    minutesUTC: float = Field(0.0, ge=0.0, le=1440.0, description="Minutes since 00:00 UTC")

    latitude: float = Field(..., ge=-90.0, le=90.0, description="Latitude (deg)")
    longitude: float = Field(..., ge=-180.0, le=180.0, description="Longitude (deg, east positive)")

    timezone: Optional[str] = Field(None, description="IANA timezone for rise/set, e.g. Europe/London")
    sidereal: bool = Field(False, description="Fagan/Bradley sidereal zodiac strings")
    includePlanets: bool = True
    includeRiseSet: bool = True


class RiseSetReq(BaseModel):
    dayOfYear: int = Field(..., ge=1, le=366)
    year: int
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    timezone: Optional[str] = None


class AnglesOut(BaseModel):
    MC: float
    IC: float
    ASC: float
    DSC: float
    VTX: float
    AVX: float


class MoonOut(BaseModel):
    longitude: float    # rad
    latitude: float     # rad


class LunarPhaseOut(BaseModel):
    phase: str
    illumination: int   # percent


class NodesOut(BaseModel):
    ascending: float    # deg
    descending: float


class ApsidesOut(BaseModel):
    perihelion: float   # deg
    aphelion: float
    perihelionDistance: float  # AU
    aphelionDistance: float


class EarthOut(BaseModel):
    longitude: float    # rad, heliocentric
    latitude: float
    distance: float     # AU


class PlanetOut(BaseModel):
    name: str
    geocentricLongitude: float           # rad, zodiac wheel
    geocentricLatitude: float
    heliocentricLongitude: Optional[float] = None
    heliocentricLatitude: float = 0.0
    heliocentricDistance: Optional[float] = None  # AU


class RiseSetResp(BaseModel):
    sunrise: str
    sunset: str
    transit: str


class SphereResp(BaseModel):
    julianDate: float
    lstDeg: float
    lstTime: str
    obliquityRad: float
    angles: AnglesOut
    sunLonRad: float
    moon: MoonOut
    lunarPhase: LunarPhaseOut
    lunarNodes: NodesOut
    ayanamshaDeg: float
    planets: List[PlanetOut]
    zodiac: Dict[str, str]
    earth: EarthOut
    lunarPerigeeDeg: float
    planetaryNodes: Dict[str, NodesOut] = {}
    planetaryApsides: Dict[str, ApsidesOut] = {}
    riseSet: Optional[RiseSetResp] = None


class ZodiacResp(BaseModel):
    longitude: float
    zodiac: str
    sign: str
    signIndex: int
    degrees: int
    minutes: int
