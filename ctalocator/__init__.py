"""
CTA Locator - Primary call-to-action detection for captured webpages.

Scores DOM interactive elements to find the page's primary CTA and
reconciles AI-generated CTA guesses against the concrete DOM.
"""

__version__ = "1.0.0"
__author__ = "CTA Locator Team"
