"""
BZ_Libs - Blur Zones Library Modules

This package contains the blur-zone subsystem of the gallery admin,
organized into specialized sub-packages:

- PathLib: Image path normalization and fuzzy zone lookup
- ZoneLib: Blur zone models, geometry and overlay rendering
- EditorLib: Interactive blur zone editor (controller, settings, Qt window)
- ZoneStoreLib: Zone persistence and image dimension lookup
"""

__version__ = "0.1.0"
