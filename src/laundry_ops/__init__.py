"""LaundryOps admin dashboard.

This package is organized by feature modules (auth, outlets, orders, staff, ...)
with a thin Flask controller layer over services that talk to a generic
record store.
"""
