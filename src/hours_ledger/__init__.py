"""Hours ledger package.

Worked-hours entries arrive from two ledgers per worker and day (the worker's
own report and their supervisor's report). This package validates and stores
them, reconciles the two sides, and derives monthly totals, bonuses and
target progress. Feature modules (worktime, reconciliation, aggregation,
bonus, targets) keep the service/repository split.
"""
