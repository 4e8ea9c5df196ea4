"""Aide colonnes Enum / Enum column helper."""

import enum


def enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """Stocker la valeur et non le nom / Persist enum values rather than member names."""
    return [member.value for member in enum_cls]
