"""Minimal XVC (Xilinx Virtual Cable) server front-end."""

__version__ = "0.1.0"
