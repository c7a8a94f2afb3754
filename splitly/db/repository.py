from tinydb import Query, TinyDB

from splitly.exceptions import PersistenceError
from splitly.models.schemas import Scenario


class ScenarioRepository:
    def __init__(self, db_path: str = "splitly.json"):
        try:
            self.db = TinyDB(db_path)
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Cannot open scenario store: {e}") from e
        self.table = self.db.table("scenarios")

    def add(self, scenario: Scenario) -> Scenario:
        data = scenario.model_dump(mode="json", by_alias=True)
        data.pop("id", None)
        try:
            doc_id = self.table.insert(data)
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Failed to save scenario: {e}") from e
        return scenario.model_copy(update={"id": doc_id})

    def get(self, id: int, user_id: str) -> Scenario | None:
        doc = self.table.get(doc_id=id)
        if doc is None or doc["user_id"] != user_id:
            return None
        return Scenario(id=doc.doc_id, **doc)

    def list_for_user(self, user_id: str, category: str | None = None) -> list[Scenario]:
        Sc = Query()
        condition = Sc.user_id == user_id
        if category:
            condition &= Sc.category == category
        scenarios = [Scenario(id=doc.doc_id, **doc) for doc in self.table.search(condition)]
        return sorted(scenarios, key=lambda s: (s.date, s.created_at), reverse=True)

    def delete(self, id: int, user_id: str) -> bool:
        if self.get(id, user_id) is None:
            return False
        try:
            self.table.remove(doc_ids=[id])
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Failed to delete scenario #{id}: {e}") from e
        return True
