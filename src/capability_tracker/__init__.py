"""capability-tracker: capabilities, milestones and versioned delivery plans."""

__version__ = "0.1.0"
