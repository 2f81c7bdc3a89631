"""Core heatmap algorithms: day partitioning, slice aggregation, calendar layout.

Pure numpy/pandas, no I/O. Rendering and sample sources live outside
this package and only consume its outputs.
"""
