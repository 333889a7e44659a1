"""
bankstress.config
=================

Parameter objects for the network generator and the contagion engine, plus
the YAML scenario loader used by :pymod:`bankstress.simulate` and the CLI.

Both parameter objects are frozen dataclasses whose defaults reproduce the
reference model (50 banks, assets in [1 000, 5 000], capital ratio in
[8 %, 15 %], 20 % macro haircut, DebtRank tolerance 1e‑4, 100 passes).
:meth:`validate` is called by the generator / engine *before* any random
draw, so a bad configuration never yields a partial network.

Example scenario file::

    seed: 7
    network:
      bank_count: 30
      assets_range: [1000, 5000]
    stress:
      max_iterations: 50
    shock: targeted:3
"""

from __future__ import annotations

import dataclasses
import logging
import numbers
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Final, Mapping, Optional, Tuple

import yaml

from .errors import ConfigurationError
from .shocks import MacroShock, Shock, parse as parse_shock

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# Model constants
# --------------------------------------------------------------------------- #
BANK_COUNT: Final[int] = 50
ASSETS_MIN: Final[float] = 1000.0
ASSETS_MAX: Final[float] = 5000.0
MIN_CAPITAL_RATIO: Final[float] = 0.08
MAX_CAPITAL_RATIO: Final[float] = 0.15

MACRO_LOSS_FACTOR: Final[float] = 0.20
IDIOSYNCRATIC_PROBABILITY: Final[float] = 0.10
IDIOSYNCRATIC_LOSS: Final[float] = 0.8
DEBT_RANK_TOLERANCE: Final[float] = 1e-4
MAX_ITERATIONS: Final[int] = 100

DEFAULT_BANK_NAMES: Final[Tuple[str, ...]] = (
    "State Bank of India", "HDFC Bank", "ICICI Bank", "Punjab National Bank",
    "Bank of Baroda", "Union Bank of India", "Canara Bank", "Axis Bank",
    "Kotak Mahindra Bank", "IndusInd Bank", "Indian Bank",
    "Central Bank of India", "Bank of India", "Indian Overseas Bank",
    "UCO Bank", "IDBI Bank", "Yes Bank", "Federal Bank", "RBL Bank",
    "IDFC First Bank", "South Indian Bank", "J&K Bank", "Karur Vysya Bank",
    "Dhanlaxmi Bank", "City Union Bank", "Bandhan Bank",
    "Au Small Finance Bank", "Equitas Small Finance Bank", "CSB Bank",
    "DCB Bank", "Suryoday Small Finance Bank", "TMB", "CanaFin Homes",
    "HDFC LTD", "PNB Housing", "LIC Housing Finance", "IIFL Finance",
    "Shriram Transport Finance", "Muthoot Finance", "Bajaj Finance",
    "Bank A", "Bank B", "Bank C", "Bank D", "Bank E",
    "Bank F", "Bank G", "Bank H", "Bank I", "Bank J",
)

Range = Tuple[float, float]


def _is_real(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _check_range(name: str, bounds: Range, *, lower: float = 0.0,
                 upper: Optional[float] = None, strict_lower: bool = True) -> None:
    """Reject malformed, inverted or out‑of‑bounds ``(min, max)`` pairs."""
    if not isinstance(bounds, (tuple, list)) or len(bounds) != 2:
        raise ConfigurationError(f"{name} must be a (min, max) pair; got {bounds!r}")
    lo, hi = bounds
    if not (_is_real(lo) and _is_real(hi)):
        raise ConfigurationError(f"{name} bounds must be numbers; got {bounds!r}")
    if lo > hi:
        raise ConfigurationError(f"{name} is inverted: min {lo} > max {hi}")
    if (lo <= lower) if strict_lower else (lo < lower):
        raise ConfigurationError(f"{name} lower bound must exceed {lower}; got {lo}")
    if upper is not None and hi > upper:
        raise ConfigurationError(f"{name} upper bound must not exceed {upper}; got {hi}")


# --------------------------------------------------------------------------- #
# Parameter objects
# --------------------------------------------------------------------------- #
@dataclass(frozen=True)
class GeneratorConfig:
    """Inputs of :func:`bankstress.algorithms.generation.generate`."""

    bank_count: int = BANK_COUNT
    assets_range: Range = (ASSETS_MIN, ASSETS_MAX)
    capital_ratio_range: Range = (MIN_CAPITAL_RATIO, MAX_CAPITAL_RATIO)
    name_pool: Tuple[str, ...] = DEFAULT_BANK_NAMES
    interbank_fraction_range: Range = (0.15, 0.30)
    creditor_count_range: Tuple[int, int] = (1, 4)
    share_range: Range = (0.1, 0.5)

    def validate(self) -> None:
        if not _is_int(self.bank_count):
            raise ConfigurationError(
                f"bank_count must be an integer; got {self.bank_count!r}"
            )
        if self.bank_count < 2:
            raise ConfigurationError(
                f"bank_count must be at least 2; got {self.bank_count}"
            )
        if isinstance(self.name_pool, (str, bytes)) or not self.name_pool:
            raise ConfigurationError("name_pool must contain at least one name")
        _check_range("assets_range", self.assets_range)
        _check_range("capital_ratio_range", self.capital_ratio_range, upper=1.0)
        _check_range("interbank_fraction_range", self.interbank_fraction_range,
                     upper=1.0, strict_lower=False)
        _check_range("share_range", self.share_range, upper=1.0)
        counts = self.creditor_count_range
        if not (isinstance(counts, (tuple, list)) and len(counts) == 2
                and all(_is_int(c) for c in counts)):
            raise ConfigurationError(
                f"creditor_count_range must be a pair of integers; got {counts!r}"
            )
        lo, hi = counts
        if lo < 1 or lo > hi:
            raise ConfigurationError(
                f"creditor_count_range must satisfy 1 <= min <= max; got {(lo, hi)}"
            )


@dataclass(frozen=True)
class StressConfig:
    """Inputs of :func:`bankstress.simulator.engine.run`."""

    macro_loss_factor: float = MACRO_LOSS_FACTOR
    idiosyncratic_probability: float = IDIOSYNCRATIC_PROBABILITY
    idiosyncratic_loss: float = IDIOSYNCRATIC_LOSS
    tolerance: float = DEBT_RANK_TOLERANCE
    max_iterations: int = MAX_ITERATIONS
    # Phase 1 and Phase 2 use different "stressed" cut‑offs.
    shock_stress_threshold: float = 0.5
    propagation_stress_threshold: float = 0.4
    failure_threshold: float = 0.9999

    def validate(self) -> None:
        if not _is_int(self.max_iterations):
            raise ConfigurationError(
                f"max_iterations must be an integer; got {self.max_iterations!r}"
            )
        if self.max_iterations < 1:
            raise ConfigurationError(
                f"max_iterations must be at least 1; got {self.max_iterations}"
            )
        if not _is_real(self.tolerance) or not self.tolerance > 0.0:
            raise ConfigurationError(f"tolerance must be positive; got {self.tolerance}")
        for name in ("macro_loss_factor", "idiosyncratic_probability",
                     "idiosyncratic_loss", "shock_stress_threshold",
                     "propagation_stress_threshold", "failure_threshold"):
            value = getattr(self, name)
            if not _is_real(value) or not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must lie in [0, 1]; got {value}")


@dataclass(frozen=True)
class Scenario:
    """One YAML scenario: what network to build and how to shock it."""

    network: GeneratorConfig = field(default_factory=GeneratorConfig)
    stress: StressConfig = field(default_factory=StressConfig)
    shock: Shock = field(default_factory=MacroShock)
    seed: Optional[int] = None


# --------------------------------------------------------------------------- #
# Mapping / YAML conversion
# --------------------------------------------------------------------------- #
_TUPLE_FIELDS = {
    "assets_range", "capital_ratio_range", "name_pool",
    "interbank_fraction_range", "creditor_count_range", "share_range",
}


def _from_mapping(cls, section: str, raw: Optional[Mapping[str, Any]]):
    """Build *cls* from a YAML section, rejecting unknown keys."""
    if raw is None:
        return cls()
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"'{section}' section must be a mapping")

    known = {f.name for f in dataclasses.fields(cls)}
    unknown = set(raw) - known
    if unknown:
        raise ConfigurationError(
            f"Unknown key(s) in '{section}' section: {sorted(unknown)}"
        )

    kwargs: Dict[str, Any] = {}
    for key, value in raw.items():
        if key in _TUPLE_FIELDS:
            if isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"):
                raise ConfigurationError(f"'{section}.{key}' must be a list")
            value = tuple(value)
        kwargs[key] = value
    try:
        return cls(**kwargs)
    except TypeError as exc:  # pragma: no cover
        raise ConfigurationError(f"Invalid '{section}' section: {exc}") from exc


def scenario_from_dict(cfg: Mapping[str, Any]) -> Scenario:
    """Convert a parsed YAML document into a validated :class:`Scenario`."""
    unknown = set(cfg) - {"network", "stress", "shock", "seed"}
    if unknown:
        raise ConfigurationError(f"Unknown top‑level key(s): {sorted(unknown)}")

    network = _from_mapping(GeneratorConfig, "network", cfg.get("network"))
    stress = _from_mapping(StressConfig, "stress", cfg.get("stress"))
    network.validate()
    stress.validate()

    shock = parse_shock(cfg.get("shock", "macro"))

    seed = cfg.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise ConfigurationError(f"seed must be an integer; got {seed!r}")

    return Scenario(network=network, stress=stress, shock=shock, seed=seed)


def load_scenario(path: str | Path) -> Scenario:
    """Parse a YAML scenario file (``yaml.safe_load``) into a :class:`Scenario`."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Scenario YAML not found: {path}")
    with path.open() as fh:
        try:
            cfg = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"{path.name} is not valid YAML") from exc

    if cfg is None:
        cfg = {}
    if not isinstance(cfg, Mapping):
        raise ConfigurationError(f"{path.name} must contain a YAML mapping")

    logger.debug("Loaded scenario %s with sections %s", path, sorted(cfg))
    return scenario_from_dict(cfg)


__all__ = [
    "BANK_COUNT",
    "ASSETS_MIN",
    "ASSETS_MAX",
    "MIN_CAPITAL_RATIO",
    "MAX_CAPITAL_RATIO",
    "MACRO_LOSS_FACTOR",
    "DEBT_RANK_TOLERANCE",
    "MAX_ITERATIONS",
    "DEFAULT_BANK_NAMES",
    "GeneratorConfig",
    "StressConfig",
    "Scenario",
    "scenario_from_dict",
    "load_scenario",
]
