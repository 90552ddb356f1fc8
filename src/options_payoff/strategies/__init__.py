"""Predefined strategy templates that generate leg sets from a spot price."""

from .catalog import CATALOG, get_template, list_templates
from .templates import LegTemplate, StrategyCategory, StrategyTemplate

__all__ = [
    "CATALOG",
    "LegTemplate",
    "StrategyCategory",
    "StrategyTemplate",
    "get_template",
    "list_templates",
]
