"""File adapters for MAC curve definitions and results."""

from .mac_files import load_mac_file, load_reduction_points, reduction_table, write_mac_file

__all__ = ["load_mac_file", "load_reduction_points", "reduction_table", "write_mac_file"]
