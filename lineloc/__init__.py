"""Localization project reconciliation and localized line provider."""

__version__ = "0.1.0"
