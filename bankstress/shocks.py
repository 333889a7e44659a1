"""
bankstress.shocks
=================

Initial‑shock specifications accepted by the contagion engine.

A shock is one of three small frozen value types (a tagged choice, not a
string flag):

* :class:`MacroShock` – every bank loses a fixed share of its external assets;
* :class:`TargetedShock` – one designated bank is forced into default;
* :class:`IdiosyncraticShock` – each bank is independently hit at random.

:func:`parse` converts the textual / YAML forms used by the CLI and scenario
files into those values.

Example
-------
>>> from bankstress.shocks import parse
>>> parse("targeted:3")
TargetedShock(bank_id=3)
>>> parse({"kind": "macro"})
MacroShock()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Final, Mapping, Union

from .errors import ConfigurationError


@dataclass(frozen=True)
class MacroShock:
    kind: ClassVar[str] = "macro"

    def describe(self) -> str:
        return "Macroeconomic shock"


@dataclass(frozen=True)
class TargetedShock:
    """Forced failure of bank ``bank_id``."""

    bank_id: int
    kind: ClassVar[str] = "targeted"

    def describe(self) -> str:
        return f"Targeted failure of bank {self.bank_id}"


@dataclass(frozen=True)
class IdiosyncraticShock:
    kind: ClassVar[str] = "idiosyncratic"

    def describe(self) -> str:
        return "Idiosyncratic (random) shocks"


Shock = Union[MacroShock, TargetedShock, IdiosyncraticShock]

# "random" is the dashboard label for idiosyncratic shocks.
_ALIASES: Final[dict[str, str]] = {
    "macro": "macro",
    "macroeconomic": "macro",
    "targeted": "targeted",
    "idiosyncratic": "idiosyncratic",
    "random": "idiosyncratic",
}


def _bank_id(raw: Any) -> int:
    try:
        bank_id = int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Targeted shock needs an integer bank id; got {raw!r}") from exc
    if bank_id < 0:
        raise ConfigurationError(f"Bank id must be non‑negative; got {bank_id}")
    return bank_id


def parse(value: Union[Shock, str, Mapping[str, Any]]) -> Shock:
    """
    Return the shock described by *value*.

    Parameters
    ----------
    value
        Either an existing shock (returned unchanged), a string such as
        ``"macro"``, ``"idiosyncratic"``, ``"random"`` or ``"targeted:<id>"``,
        or a mapping ``{"kind": ..., "bank_id": ...}`` as found in YAML files.

    Raises
    ------
    ConfigurationError
        Unknown kind, or a targeted shock without a valid bank id.
    """
    if isinstance(value, (MacroShock, TargetedShock, IdiosyncraticShock)):
        return value

    if isinstance(value, Mapping):
        kind_raw = value.get("kind")
        bank_raw = value.get("bank_id")
    elif isinstance(value, str):
        kind_raw, _, bank_raw = value.partition(":")
        bank_raw = bank_raw or None
    else:
        raise ConfigurationError(f"Cannot interpret {value!r} as a shock")

    kind = _ALIASES.get(str(kind_raw).strip().lower())
    if kind is None:
        raise ConfigurationError(
            f"Unknown shock kind {kind_raw!r}. Allowed values are {sorted(_ALIASES)}."
        )

    if kind == "targeted":
        if bank_raw is None:
            raise ConfigurationError("Targeted shock requires a bank id, e.g. 'targeted:3'")
        return TargetedShock(_bank_id(bank_raw))
    if bank_raw is not None:
        raise ConfigurationError(f"Shock kind '{kind}' does not take a bank id")
    return MacroShock() if kind == "macro" else IdiosyncraticShock()


__all__ = [
    "MacroShock",
    "TargetedShock",
    "IdiosyncraticShock",
    "Shock",
    "parse",
]
