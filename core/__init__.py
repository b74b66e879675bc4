"""Core engines for changetrail."""
