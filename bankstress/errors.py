"""
bankstress.errors
=================

Centralised custom exceptions for the **bankstress** package.

Every layer (configuration → generator → engine → CSV I/O) signals failures
through the classes below, so callers only need to catch
:class:`BankstressError` to handle anything project‑specific.

Non‑convergence of the DebtRank loop is deliberately *not* represented here:
hitting the iteration cap is a valid outcome carried on the result object.
"""

from __future__ import annotations


class BankstressError(Exception):
    """Base‑class for all bankstress‑specific exceptions."""


class ConfigurationError(BankstressError):
    """
    Raised before any random draw when generation, engine or shock
    parameters are unusable.

    Typical causes
    --------------
    * ``bank_count < 2`` (creditor selection needs at least one other bank)
    * Empty name pool
    * Inverted ranges (``min > max``) or non‑positive bounds
    * Targeted shock naming a bank id that does not exist
    * Malformed YAML scenario file
    """


class InvariantViolation(BankstressError):
    """
    Raised when a freshly generated network breaks a balance‑sheet
    invariant (non‑positive assets or capital, self‑lending, a debtor row
    exceeding its interbank liabilities).

    Indicates a generator bug; values are never silently clamped.
    """


class SchemaError(BankstressError):
    """
    Raised by :pymod:`bankstress.io_utils` and the ``to_frame`` views when a
    table fails :pydata:`pandera` schema validation.
    """


__all__ = [
    "BankstressError",
    "ConfigurationError",
    "InvariantViolation",
    "SchemaError",
]
