"""
Shape Modeler - draw planar vertex/edge graphs and fill their closed loops.
"""

__version__ = "0.1.0"
