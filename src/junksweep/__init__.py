"""junksweep: find and remove OS-generated junk files from removable volumes."""

__version__ = "0.1.0"
