"""Seminar management package.

Organized by feature modules (seminars, registrations, certificates, ...)
with a thin Flask controller layer over service/repository layers.
"""
