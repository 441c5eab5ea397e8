from dataclasses import dataclass, field
from typing import Dict

from models import Asset, Expense, Income, Liability, SimulationInput

@dataclass
class EntityRegistry:
    """
    Name-indexed plan definitions for lookups inside the year loop.
    Names are the join keys between definitions and run state; a duplicated
    name keeps the later definition.
    """
    incomes: Dict[str, Income] = field(default_factory=dict)
    expenses: Dict[str, Expense] = field(default_factory=dict)
    assets: Dict[str, Asset] = field(default_factory=dict)
    liabilities: Dict[str, Liability] = field(default_factory=dict)

    @classmethod
    def from_input(cls, inp: SimulationInput) -> "EntityRegistry":
        return cls(
            incomes={i.name: i for i in inp.incomes},
            expenses={e.name: e for e in inp.expenses},
            assets={a.name: a for a in inp.assets},
            liabilities={l.name: l for l in inp.liabilities},
        )
