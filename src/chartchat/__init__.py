"""ChartChat - conversational chart authoring over an embedded visual host."""

__version__ = "0.1.0"
