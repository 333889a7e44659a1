"""
algorithms package
==================

Numerical core: network generation, Phase 1 shocks, DebtRank propagation and
aggregate metrics.  Modules are imported individually, e.g.
``from bankstress.algorithms import debtrank``.
"""
