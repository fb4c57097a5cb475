from versweep.core.process.abc import ProcessResult, ProcessRunner, Stdio
from versweep.core.process.real import RealProcessRunner

__all__ = ["ProcessResult", "ProcessRunner", "RealProcessRunner", "Stdio"]
