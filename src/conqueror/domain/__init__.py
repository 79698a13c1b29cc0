"""Rule engine for Conqueror matches.

The package holds every game rule and operates purely in-memory:

* Dataclasses describing every entity (see :mod:`models`).
* Enumerations and typed rejections (:mod:`enums`, :mod:`errors`).
* Rule configuration objects (see :mod:`rules_config`).
* Static map graphs (:mod:`maps`).
* Pure rule functions: cards (:mod:`deck`), the army ledger (:mod:`land`),
  combat (:mod:`combat`), turn arithmetic (:mod:`turn`), the match lifecycle
  (:mod:`session`) and in-match actions (:mod:`play`).

Persistence adapters translate the dataclasses to storage; the rules never
touch storage directly.
"""

from . import (
    combat,
    deck,
    enums,
    errors,
    land,
    maps,
    models,
    play,
    rules_config,
    session,
    turn,
)

__all__ = [
    "combat",
    "deck",
    "enums",
    "errors",
    "land",
    "maps",
    "models",
    "play",
    "rules_config",
    "session",
    "turn",
]
