"""Package operators for executing installation and removal actions."""

from liner.operators.base import Operator
from liner.operators.cargo import CargoError, CargoOperator

__all__ = ["CargoError", "CargoOperator", "Operator"]
