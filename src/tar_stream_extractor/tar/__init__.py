"""Tar record reading and decoding."""
