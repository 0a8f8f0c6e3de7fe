"""Delimited output components."""

from .table_writer import TableWriter, build_output_path, derive_columns

__all__ = ['TableWriter', 'build_output_path', 'derive_columns']
