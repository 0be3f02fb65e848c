"""Interactive log response-factor strip plots from qNTA spreadsheet exports."""

__version__ = "0.1.0"
