from .workflow import AGENT_NAME, PollPolicy, SignalWorkflow, WorkflowState

__all__ = ["AGENT_NAME", "PollPolicy", "SignalWorkflow", "WorkflowState"]
