"""Schema types, errors and EXDSchema/SaintCoinach parsers for FFXIV Excel sheets."""

__version__ = "0.1.0"
__all__ = ["errors", "schema", "lcs", "exdschema", "saint_coinach"]