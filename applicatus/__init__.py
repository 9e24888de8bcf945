"""
Applicatus - rules core for a "Das Schwarze Auge" companion.

Dice notation, cost formulas, harvest descriptions, the Aventurian calendar
and three-attribute checks.
"""

__version__ = "0.1.0"
