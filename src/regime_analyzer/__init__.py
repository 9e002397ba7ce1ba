"""Regime Analyzer - comparador de regimes tributários para pessoas jurídicas."""

__version__ = "0.3.0"
