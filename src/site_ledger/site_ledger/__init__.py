"""Site Labor Ledger package.

Feature modules (attendance, worklogs, sites, payroll) follow the same split:
domain models, a repository Protocol with a MySQL implementation, services, and
a thin Flask controller layer.
"""
