"""Inventario y ventas con stock derivado de registros de eventos."""

__version__ = '1.0.0'
