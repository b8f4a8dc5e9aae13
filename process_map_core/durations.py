"""
Normalizador de duraciones: texto libre → minutos enteros.

Reglas:
- Se toma el primer número decimal del texto ("1.5", "1,5" o "90").
- La unidad se decide por palabras clave, en orden de prioridad:
  horas (×60) → días (×60×8) → semanas (×60×8×5) → minutos.
- Gana la primera categoría que matchea. Expresiones compuestas como "1h30"
  no se suman: se leen como 1 hora.
- Sin número → 0.
"""

from __future__ import annotations

import re
from typing import FrozenSet, List, Optional, Tuple

WORKDAY_HOURS = 8
WORKWEEK_DAYS = 5

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = MINUTES_PER_HOUR * WORKDAY_HOURS
MINUTES_PER_WEEK = MINUTES_PER_DAY * WORKWEEK_DAYS

_NUMBER = re.compile(r"\d+(?:[.,]\d+)?")
_WORD = re.compile(r"[^\W\d_]+")

# (abreviaturas exactas, prefijos de palabra, factor)
UNIT_KEYWORDS: Tuple[Tuple[FrozenSet[str], Tuple[str, ...], int], ...] = (
    (frozenset({"h", "hr", "hrs", "ora", "ore"}), ("hour",), MINUTES_PER_HOUR),
    (frozenset({"d", "g", "gg"}), ("giorn", "day"), MINUTES_PER_DAY),
    (frozenset({"w", "sett"}), ("settiman", "week"), MINUTES_PER_WEEK),
)


def _first_number(text: str) -> Optional[float]:
    match = _NUMBER.search(text)
    if match is None:
        return None
    return float(match.group(0).replace(",", "."))


def _unit_factor(words: List[str]) -> int:
    for exact, prefixes, factor in UNIT_KEYWORDS:
        for word in words:
            if word in exact or word.startswith(prefixes):
                return factor
    return 1


def parse_duration_minutes(text: str) -> int:
    """
    Convierte una duración escrita a minutos.

    >>> parse_duration_minutes("2 ore")
    120
    >>> parse_duration_minutes("1,5h")
    90
    >>> parse_duration_minutes("circa")
    0
    """
    if not text:
        return 0

    lowered = text.lower()
    number = _first_number(lowered)
    if number is None:
        return 0

    factor = _unit_factor(_WORD.findall(lowered))
    return int(round(number * factor))
