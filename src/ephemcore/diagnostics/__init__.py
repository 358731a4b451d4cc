"""Diagnostics (optional; require numpy/matplotlib and a JPL kernel)."""
