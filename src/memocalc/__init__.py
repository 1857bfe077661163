"""Memoized arithmetic-expression evaluator."""

__all__ = [
    "EXPONENT_MODULUS",
    "MAX_EXPONENT",
    "Cache",
    "Calculation",
    "Commutativity",
    "DivisionError",
    "EvaluationReport",
    "Internal",
    "InvalidExponentError",
    "Leaf",
    "MalformedTreeError",
    "MemocalcError",
    "Node",
    "Operation",
    "PersistentMap",
    "ReportEntry",
    "State",
    "TraceStep",
    "add",
    "build_report",
    "calculate",
    "constant",
    "evaluate",
    "exponentiate",
    "export_to_toml",
    "make_key",
    "modulo",
    "multiply",
    "trace",
]

from ._cache import Cache
from ._calculation import Calculation, make_key
from ._errors import DivisionError, InvalidExponentError, MalformedTreeError, MemocalcError
from ._eval import TraceStep, calculate, evaluate, trace
from ._io import EvaluationReport, ReportEntry, build_report, export_to_toml
from ._node import Internal, Leaf, Node, add, constant, exponentiate, modulo, multiply
from ._operation import EXPONENT_MODULUS, MAX_EXPONENT, Commutativity, Operation
from ._pmap import PersistentMap
from ._state import State
