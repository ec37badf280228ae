from .common import IR_VERSION, Diagnostic, DiagnosticCollector, Provenance
from .entity import EntityIR
from .field import FieldIR
from .intents import IntentIR

__all__ = [
    "IR_VERSION",
    "Diagnostic",
    "DiagnosticCollector",
    "EntityIR",
    "FieldIR",
    "IntentIR",
    "Provenance",
]
