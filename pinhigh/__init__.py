"""Shot-by-shot golf hole simulator with handicap calibration."""

__version__ = "0.1.0"
