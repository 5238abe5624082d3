"""Tracker exceptions."""


class TrackerError(Exception):
	"""Base class for user-facing tracker errors."""
	pass


class CapabilityImportError(TrackerError):
	"""Raised when a capability CSV cannot be imported at all."""
	pass


class PlanValidationError(TrackerError):
	"""Raised when a plan's phases fail validation. Nothing is saved."""

	def __init__(self, errors: dict[str, str]):
		self.errors = errors
		super().__init__("Please fix the errors before submitting")

	@property
	def messages(self) -> list[str]:
		return list(self.errors.values())


class PlanSaveError(TrackerError):
	"""Raised when a valid plan could not be saved."""
	pass
