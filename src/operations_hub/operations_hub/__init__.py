"""Operations Hub package.

Organized by feature modules (inventory, shifts, briefings, trainings, ...)
with a thin Flask controller layer over service/repository layers, plus the
HTTP client wrappers used by the dashboard (``client``).
"""
