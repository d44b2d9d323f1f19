"""Application services shared by the use cases."""

from .escalation_notifier import ESCALATION_REASON, EscalationNotifier
from .workflow import WorkflowRecorder

__all__ = ["EscalationNotifier", "WorkflowRecorder", "ESCALATION_REASON"]
