from types import SimpleNamespace

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

import database
import main
from customizer_store import CustomizerSession


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    def sort(self, keys):
        # apply secondary keys first; list.sort is stable
        for key, direction in reversed(list(keys)):
            self._docs.sort(key=lambda d: d.get(key), reverse=direction < 0)
        return self

    def limit(self, n):
        self._docs = self._docs[:n]
        return self

    def __iter__(self):
        return iter(self._docs)


class FakeCollection:
    """Just enough of pymongo's Collection for the design helpers."""

    def __init__(self):
        self.docs = []

    @staticmethod
    def _match(doc, filt):
        return all(doc.get(k) == v for k, v in filt.items())

    def insert_one(self, doc):
        doc = dict(doc)
        doc.setdefault("_id", ObjectId())
        self.docs.append(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    def find(self, filt=None):
        return FakeCursor([dict(d) for d in self.docs if self._match(d, filt or {})])

    def find_one(self, filt):
        for d in self.docs:
            if self._match(d, filt):
                return dict(d)
        return None

    def delete_one(self, filt):
        for i, d in enumerate(self.docs):
            if self._match(d, filt):
                del self.docs[i]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


class FakeDatabase:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection())

    def list_collection_names(self):
        return list(self.collections)


@pytest.fixture
def fake_db(monkeypatch):
    fake = FakeDatabase()
    monkeypatch.setattr(database, "db", fake)
    return fake


@pytest.fixture
def no_db(monkeypatch):
    monkeypatch.setattr(database, "db", None)


@pytest.fixture
def session():
    s = CustomizerSession()
    main.app.state.session = s
    return s


@pytest.fixture
def client(session):
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


class FakeDesigner:
    """Stands in for AIDesigner in route tests."""

    def __init__(self, colors=None, error=None):
        self.colors = colors
        self.error = error
        self.prompts = []

    def suggest(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return dict(self.colors)


@pytest.fixture
def use_designer():
    def install(designer):
        main.app.dependency_overrides[main.get_ai_designer] = lambda: designer
        return designer
    return install
