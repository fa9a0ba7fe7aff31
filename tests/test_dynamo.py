from decimal import Decimal

from app.db import dynamo


class FakeExpensesTable:
    def __init__(self, items):
        self.items = items

    def query(self, **kwargs):
        return {"Items": self.items}


class FakeCategoriesTable:
    def __init__(self, items):
        self.items = items

    def scan(self, **kwargs):
        return {"Items": self.items}


stored_rows = [
    {"user_id": "u1", "expense_id": "e1", "amount": Decimal("10.10"), "description": "Bus",
     "date": "2024-02-01", "category_id": "travel"},
    {"user_id": "u1", "expense_id": "e2", "amount": Decimal("20.20"), "description": "Book",
     "date": "2024-02-03", "category_id": "blank"},
]

stored_categories = [
    {"category_id": "travel", "name": "Travel", "icon": "bus", "color": "#0af"},
    {"category_id": "blank", "name": "  ", "color": "#000"},
]


def test_category_ref_without_name_is_none():
    assert dynamo._category_ref({"category_id": "c", "name": None}) is None
    assert dynamo._category_ref({"category_id": "c", "name": "  "}) is None
    assert dynamo._category_ref({"category_id": "c"}) is None
    assert dynamo._category_ref(None) is None


def test_category_ref_keeps_display_fields():
    ref = dynamo._category_ref(stored_categories[0])
    assert ref == {"category_id": "travel", "name": "Travel", "icon": "bus", "color": "#0af"}


def test_expenses_keep_decimal_amounts_and_join_categories(monkeypatch):
    monkeypatch.setattr(dynamo, "expenses_table", FakeExpensesTable(stored_rows))
    monkeypatch.setattr(dynamo, "categories_table", FakeCategoriesTable(stored_categories))

    expenses = dynamo.get_expenses_for_user("u1")

    assert [exp["expense_id"] for exp in expenses] == ["e2", "e1"]
    assert expenses[0]["amount"] == Decimal("20.20")
    assert isinstance(expenses[1]["amount"], Decimal)
    assert expenses[0]["category"] is None
    assert expenses[1]["category"]["name"] == "Travel"
