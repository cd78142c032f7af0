from __future__ import annotations

import random

TOWN_NAMES = [
    "Abilene", "Alvin", "Amarillo", "Andrews", "Aledo", "Argyle", "Athens", "Austin Bowie", "Azle", "Bastrop",
    "Beaumont", "Bellville", "Belton", "Boerne", "Brenham", "Brownwood", "Burkburnett", "Calallen", "Canyon", "Carthage",
    "Celina", "China Spring", "Cleburne", "Columbus", "Comanche", "Corsicana", "Crockett", "Cuero", "Decatur", "Del Rio",
    "Denton", "Diboll", "Eagle Pass", "Ennis", "Falfurrias", "Floresville", "Forney", "Frisco", "Gainesville", "Gilmer",
    "Gladewater", "Graham", "Granbury", "Gregory", "Hallsville", "Henderson", "Hereford", "Hillsboro", "Huntsville", "Jacksonville",
    "Jasper", "Kerrville", "Kilgore", "La Grange", "Lamesa", "Lampasas", "Levelland", "Liberty Hill", "Lindale", "Llano",
    "Lufkin", "Madisonville", "Mansfield", "Marshall", "Mexia", "Midland", "Mineola", "Mount Pleasant", "Nacogdoches", "Navasota",
    "Odessa", "Palestine", "Pampa", "Paris", "Pecos", "Pflugerville", "Pleasanton", "Port Lavaca", "Quitman", "Refugio",
    "Rockdale", "Rockwall", "Round Rock", "Sealy", "Seguin", "Sherman", "Silsbee", "Snyder", "Stephenville", "Sulphur Springs",
    "Sweetwater", "Taylor", "Temple", "Tyler", "Uvalde", "Van", "Vernon", "Waco", "Waxahachie", "Yoakum",
]

MASCOT_NAMES = [
    "Antelopes", "Badgers", "Bearcats", "Bobcats", "Broncos", "Buffaloes", "Bulldogs", "Cardinals", "Cougars", "Cowboys",
    "Coyotes", "Eagles", "Falcons", "Gators", "Hornets", "Indians", "Jackets", "Leopards", "Lions", "Longhorns",
    "Lumberjacks", "Mustangs", "Owls", "Panthers", "Pirates", "Rattlers", "Rebels", "Roughnecks", "Steers", "Tigers",
    "Tornadoes", "Trojans", "Wildcats", "Wolves", "Yellowjackets",
]


CAMPUS_PREFIXES = ["North", "South", "East", "West"]


class OpponentNameGenerator:
    """Opponent schools for one season: at most one school per town.

    Plain town names are handed out first in a shuffled order. Once every town
    has a school on the slate, campus-prefixed schools ("North Tyler ...") follow.
    """

    def __init__(self, season_number: int, stream: str = "regular", salt: int = 0) -> None:
        self._rng = random.Random(f"{stream}:{season_number}:{salt}")
        towns = TOWN_NAMES[:]
        self._rng.shuffle(towns)
        campuses = [f"{prefix} {town}" for prefix in CAMPUS_PREFIXES for town in towns]
        self._towns = towns + campuses
        self._taken: set[str] = set()

    @staticmethod
    def town_of(name: str) -> str:
        # Mascots are single words, so the town is everything before the last space.
        return name.rsplit(" ", 1)[0]

    def reserve(self, names: list[str]) -> None:
        self._taken.update(self.town_of(name) for name in names)

    def next_name(self) -> str:
        while self._towns:
            town = self._towns.pop(0)
            if town in self._taken:
                continue
            self._taken.add(town)
            return f"{town} {self._rng.choice(MASCOT_NAMES)}"
        raise ValueError("Every town already has a school on this season's slate.")
