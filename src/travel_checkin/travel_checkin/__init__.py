"""Travel check-in package.

Organized by feature modules (travelers, ...) with a thin Flask controller
layer on top of service/repository layers. The reconciliation engine in
``travelers.reconciler`` is pure and does no I/O.
"""
