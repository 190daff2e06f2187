"""
wgnet Services Layer

Policy sections and the orchestrator sequencing them.
"""

from .orchestrator import NetworkOrchestrator, OrchestratorState, UpResult, TeardownReport

__all__ = ["NetworkOrchestrator", "OrchestratorState", "UpResult", "TeardownReport"]
