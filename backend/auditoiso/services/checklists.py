"""
Default checklist templates.

Templates are seeded into the ``checklists`` collection the first time they
are requested and served from storage afterwards.
"""
from typing import List

from auditoiso.db import Database, get_db
from auditoiso.logger import logger
from auditoiso.schemas.checklist import ChecklistTemplate

DEFAULT_CHECKLISTS = [
    {
        "name": "ISO 9001 - Default",
        "standard": "ISO 9001",
        "version": "1.0",
        "items": [
            {"id": "9001-1", "text": "Existe un proceso documentado de gestión de la calidad", "weight": 3},
            {"id": "9001-2", "text": "Se realizan revisiones de desempeño periódicas", "weight": 2},
            {"id": "9001-3", "text": "Se mide la satisfacción del cliente", "weight": 2},
            {"id": "9001-4", "text": "Los procesos cuentan con indicadores definidos", "weight": 3},
        ],
    },
    {
        "name": "ISO 14001 - Default",
        "standard": "ISO 14001",
        "version": "1.0",
        "items": [
            {"id": "14001-1", "text": "Existe política ambiental documentada", "weight": 3},
            {"id": "14001-2", "text": "Se identifican aspectos e impactos ambientales", "weight": 3},
            {"id": "14001-3", "text": "Hay controles operacionales para riesgos ambientales", "weight": 2},
            {"id": "14001-4", "text": "Se registran no conformidades ambientales", "weight": 2},
        ],
    },
]


class ChecklistService:
    def __init__(self, db: Database = None):
        self.db = db or get_db()

    def get_defaults(self) -> List[ChecklistTemplate]:
        records = self.db.checklists.all()
        if not records:
            def seed(current):
                # another request may have seeded in the meantime
                return current or [dict(c) for c in DEFAULT_CHECKLISTS]

            records = self.db.checklists.update(seed)
            logger.info(f"Seeded {len(records)} default checklists")
        return [ChecklistTemplate.model_validate(r) for r in records]
