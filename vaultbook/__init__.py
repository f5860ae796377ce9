"""Vaultbook - homepages, banners, statistics and export playlist for a study vault."""

__version__ = "0.1.0"
