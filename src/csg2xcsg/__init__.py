"""csg2xcsg: convert OpenSCAD .csg dumps to xcsg XML."""

__version__ = "0.3.0"
