"""
Aylık sabit giderler (reklam ve işletme) - kanal bazında dağıtılmaz.
"""
from __future__ import annotations

from dataclasses import dataclass

from ecommerce_finance.utils.numbers import parse_number


@dataclass(frozen=True)
class MonthlyExpense:
    marketing: float = 0.0     # Harcanan reklam bakiyesi
    operations: float = 0.0    # Aylık işletme gideri

    def add(self, marketing: float = 0.0, operations: float = 0.0) -> "MonthlyExpense":
        return MonthlyExpense(self.marketing + marketing, self.operations + operations)

    def to_dict(self) -> dict:
        return {"marketing": self.marketing, "operations": self.operations}


# Ay etiketi → gider. Olmayan ay sıfır gider demektir.
ExpenseTable = dict[str, MonthlyExpense]


def expenses_from_dict(data: dict) -> ExpenseTable:
    """{"2025 Ocak": {"marketing": 100, "operations": 50}} yapısını okur."""
    table: ExpenseTable = {}
    for period, values in (data or {}).items():
        values = values if isinstance(values, dict) else {}
        table[str(period)] = MonthlyExpense(
            marketing=parse_number(values.get("marketing")),
            operations=parse_number(values.get("operations")),
        )
    return table


def expenses_to_dict(expenses: ExpenseTable) -> dict:
    return {period: exp.to_dict() for period, exp in expenses.items()}
