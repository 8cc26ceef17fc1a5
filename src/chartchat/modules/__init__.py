"""ChartChat feature modules."""
