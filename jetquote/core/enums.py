from enum import Enum


class TripType(str, Enum):
    ONEWAY = "oneway"
    ROUNDTRIP = "roundtrip"
    MULTILEG = "multileg"

    def __str__(self):
        return self.value


class AirportClass(str, Enum):
    LARGE = "large_airport"
    MEDIUM = "medium_airport"
    SMALL = "small_airport"

    def __str__(self):
        return self.value


# Resolution tiers, strongest first
CLASS_WEIGHT = {
    AirportClass.LARGE: 100,
    AirportClass.MEDIUM: 80,
    AirportClass.SMALL: 60,
}


class MatchSource(str, Enum):
    CODE = "code"
    DIRECTORY = "directory"
    FALLBACK = "fallback"
    ALIAS = "alias"

    def __str__(self):
        return self.value
