"""Polyroute - Polyline geometry for diagram connectors.

Polyroute simplifies, measures, smooths and re-routes the polylines that
connect diagram nodes. Connectors are routed around rectangles, polygons and
point obstacles (such as labels) one obstacle at a time.

Example:
    $ polyroute diagram.json

This will create diagram-routed.json with every connector detoured around the
obstacles it crosses.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
