"""checkdate - creation-date stamps for unchecked Markdown checkboxes."""

__version__ = "0.1.0"
