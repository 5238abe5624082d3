"""Phase-level comparison of two plans."""

from .models import PHASE_NAMES, PlanDiff, PlanPhases

# progress, notes and assigned_to are operational and never reported
COMPARED_FIELDS = (
	("start_date", "startDate"),
	("end_date", "endDate"),
	("status", "status"),
)


def compare_phases(phases1: PlanPhases, phases2: PlanPhases) -> PlanDiff:
	"""
	Shallow structural diff of two phase sets.

	A phase only in the second set is ``added``, only in the first is
	``removed``. For phases in both, each mismatching compared field is
	reported as ``<phase>.<field>`` in ``changed``.
	"""
	diff = PlanDiff()
	for name in PHASE_NAMES:
		phase1 = phases1.get(name)
		phase2 = phases2.get(name)

		if phase1 is None and phase2 is not None:
			diff.added.append(name)
		elif phase1 is not None and phase2 is None:
			diff.removed.append(name)
		elif phase1 is not None and phase2 is not None:
			for attr, label in COMPARED_FIELDS:
				if getattr(phase1, attr) != getattr(phase2, attr):
					diff.changed.append(f"{name}.{label}")
	return diff
