"""
CAFIRE package
==============

Exploratory reports over historical California wildfire records.

- The CLI entry point is in `cafire/cli.py`.
- The report pipeline (load -> aggregate -> relabel -> chart) is in `cafire/pipeline.py`.
- Dataset loading is in `cafire/loader.py`.
- Aggregation is in `cafire/aggregate.py`, charts in `cafire/charts.py`.
"""

__version__ = '0.3.0'
