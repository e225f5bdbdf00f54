from __future__ import annotations

import random

from .config import GENERATED_STRENGTH_BOUNDS, GENERATED_STRENGTH_MEAN, GENERATED_STRENGTH_STDDEV

PLACES = [
    "Blåmyren", "Snutholmen", "Gräsängen", "Björkbacken", "Tallkronan", "Granstorp",
    "Lindeborg", "Ekdalen", "Aspnäs", "Almhult", "Rödbergen", "Grönlund",
    "Stenbacken", "Sandviken", "Klippan", "Åkersberga", "Vallentuna", "Täby",
    "Sollentuna", "Huddinge", "Botkyrka", "Haninge", "Tyresö", "Nacka",
    "Värmdö", "Vaxholm", "Norrtälje", "Sigtuna", "Märsta", "Arlanda",
    "Knivsta", "Håbo", "Enköping", "Strängnäs", "Mariefred", "Trosa",
    "Nyköping", "Oxelösund", "Flen", "Katrineholm", "Vingåker", "Gnesta",
    "Södertälje", "Salem", "Nykvarn", "Järna", "Eskilstuna", "Torshälla",
    "Sundbyberg", "Solna", "Danderyd", "Lidingö", "Österåker", "Rimbo",
    "Hallstavik", "Kapellskär", "Grisslehamn",
]

SUFFIXES = [
    "IF", "BK", "FK", "AIK", "IFK", "GIF", "AIF", "BIF", "FIF", "KIF",
    "SK", "FF", "FC", "United", "City", "Town", "Akademi", "Fotboll",
]

# Blank entries weight the draw toward "<place> <suffix>" names.
PREFIXES = ["", "", "", "", "", "IFK", "AIK", "BK", "IF", "SK", "GIF", "AIF"]


class TeamNameGenerator:
    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)
        self._used: set[str] = set()
        self._pool = [f"{prefix} {place}" for prefix in PREFIXES if prefix for place in PLACES]
        self._pool.extend(f"{place} {suffix}" for place in PLACES for suffix in SUFFIXES)
        self._pool = sorted(set(self._pool))
        self._rng.shuffle(self._pool)
        self._idx = 0

    def reserve(self, names: list[str]) -> None:
        self._used.update(names)

    def _candidate(self) -> str:
        place = self._rng.choice(PLACES)
        prefix = self._rng.choice(PREFIXES)
        if prefix:
            return f"{prefix} {place}"
        return f"{place} {self._rng.choice(SUFFIXES)}"

    def next_name(self) -> str:
        for _attempt in range(100):
            name = self._candidate()
            if name not in self._used:
                self._used.add(name)
                return name

        while self._idx < len(self._pool):
            name = self._pool[self._idx]
            self._idx += 1
            if name not in self._used:
                self._used.add(name)
                return name

        base = self._candidate()
        counter = 2
        while f"{base} {counter}" in self._used:
            counter += 1
        name = f"{base} {counter}"
        self._used.add(name)
        return name

    def next_strength(self) -> float:
        low, high = GENERATED_STRENGTH_BOUNDS
        value = self._rng.gauss(GENERATED_STRENGTH_MEAN, GENERATED_STRENGTH_STDDEV)
        return round(max(low, min(high, value)), 1)
