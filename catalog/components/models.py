"""Record type and SQLAlchemy model for the component catalog."""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from extensions import db

# Useful pre-defined set of categories
STANDARD_CATEGORIES = (
    "Resistor", "Potentiometer", "R-Network",
    "Capacitor (C)", "Aluminum Cap", "Inductor (L)",
    "Diode (D)", "Power Diode", "LED",
    "Transistor", "Mosfet", "IGBT",
    "Integrated Circuit (IC)", "IC Analog", "IC Digital",
    "Connector", "Socket", "Switch",
    "Fuse", "Mounting", "Heat Sink",
    "Microphone", "Transformer", "? MYSTERY",
)

TEXT_FIELDS = (
    "value", "category", "description", "quantity",
    "notes", "datasheet_url", "footprint",
)


def is_standard_category(name: str) -> bool:
    return name in STANDARD_CATEGORIES


@dataclass
class Component:
    """
    One inventory bin.

    ``equiv_set`` names the equivalence group the bin belongs to. A component
    that was never grouped is its own singleton group, so ``equiv_set``
    defaults to ``id``. ``quantity`` is free text; units and formats vary.
    """

    id: int
    equiv_set: Optional[int] = None
    value: str = ""
    category: str = ""
    description: str = ""
    quantity: str = ""
    notes: str = ""
    datasheet_url: str = ""
    drawersize: Optional[int] = None
    footprint: str = ""

    def __post_init__(self) -> None:
        if self.equiv_set is None:
            self.equiv_set = self.id
        for name in TEXT_FIELDS:
            if getattr(self, name) is None:
                setattr(self, name, "")

    def copy(self) -> "Component":
        return replace(self)

    @property
    def is_grouped(self) -> bool:
        return self.equiv_set != self.id


class ComponentRecord(db.Model):
    """Persistent row behind the durable store."""

    __tablename__ = "component"

    id = db.Column(db.Integer, primary_key=True, autoincrement=False)
    equiv_set = db.Column(db.Integer, nullable=False, index=True)
    category = db.Column(db.Text)
    value = db.Column(db.Text)
    description = db.Column(db.Text)
    quantity = db.Column(db.Text)
    notes = db.Column(db.Text)
    datasheet_url = db.Column(db.Text)
    drawersize = db.Column(db.Integer)
    footprint = db.Column(db.Text)
    # bumped on every content commit, compared on update
    version = db.Column(db.Integer, nullable=False, default=1)
    created = db.Column(db.DateTime, default=datetime.utcnow)
    updated = db.Column(db.DateTime)

    def to_component(self) -> Component:
        values = {name: getattr(self, name) or "" for name in TEXT_FIELDS}
        return Component(
            id=self.id,
            equiv_set=self.equiv_set,
            drawersize=self.drawersize,
            **values,
        )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<ComponentRecord {self.id}: {self.category} {self.value}>"
