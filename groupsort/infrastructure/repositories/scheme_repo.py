from typing import List, Optional

from groupsort.infrastructure.db.session import SessionLocal
from groupsort.infrastructure.models import SavedScheme


class SchemeRepo:
    def __init__(self, db=None):
        self.db = db or SessionLocal()

    def get(self, name: str) -> Optional[SavedScheme]:
        return self.db.query(SavedScheme).filter(SavedScheme.name == name).first()

    def list_names(self) -> List[str]:
        return [row.name for row in self.db.query(SavedScheme).order_by(SavedScheme.name).all()]

    def save(self, name: str, document: dict) -> SavedScheme:
        row = self.get(name)
        if row is None:
            row = SavedScheme(name=name)
        row.version = document.get("version", "")
        row.document = document
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def delete(self, name: str) -> bool:
        row = self.get(name)
        if not row:
            return False
        self.db.delete(row)
        self.db.commit()
        return True
