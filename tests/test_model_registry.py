"""
Tests for ModelRegistry and the Burrow entry point.
"""

import pytest

from burrow import Burrow, CollectionProxy, Document, ModelRegistry, SetupError

from .conftest import BlogPost, Person


class Note(Document):
    text: str


class NoteCollection(CollectionProxy):
    def create_blank(self):
        return self.create(text="")


class TestModelRegistry:
    """Test registering Document classes by name"""

    def test_register_by_class_name(self):
        registry = ModelRegistry()
        registry.register(Note)
        assert "Note" in registry
        assert registry.name_to_cls("Note") is Note
        assert registry.cls_to_name(Note) == "Note"
        assert len(registry) == 1
        assert list(registry) == ["Note"]

    def test_register_as_decorator(self):
        registry = ModelRegistry()

        @registry.register(name="Memo")
        class Memo(Document):
            text: str

        assert registry.name_to_cls("Memo") is Memo
        assert registry.get_document_info("Memo").proxy_cls is CollectionProxy

    def test_duplicate_name(self):
        registry = ModelRegistry()
        registry.register(Note)
        with pytest.raises(SetupError):
            registry.register(Person, name="Note")

    def test_duplicate_class(self):
        registry = ModelRegistry()
        registry.register(Note)
        with pytest.raises(SetupError):
            registry.register(Note, name="Other")

    def test_rejects_non_documents(self):
        registry = ModelRegistry()
        with pytest.raises(SetupError):
            registry.register(dict)
        with pytest.raises(SetupError):
            registry.register(Document)

    def test_rejects_bad_proxy_class(self):
        registry = ModelRegistry()
        with pytest.raises(SetupError):
            registry.register(Note, proxy_cls=dict)

    def test_unknown_name(self):
        with pytest.raises(SetupError):
            ModelRegistry().get_document_info("Nothing")

    def test_unregistered_class(self):
        with pytest.raises(SetupError):
            ModelRegistry().cls_to_name(Note)


class TestBurrow:
    """Test proxy construction and caching"""

    def test_collection_is_cached(self, burrow):
        assert burrow.collection("Person") is burrow.collection("Person")

    def test_collection_name_override(self, burrow):
        proxy = burrow.collection("Person", "archived_people")
        assert proxy.collection_name == "archived_people"
        assert proxy is not burrow.collection("Person")

    def test_registered_name_differs_from_class(self, burrow):
        assert burrow.collection("Post").model_cls is BlogPost

    def test_custom_proxy_class(self, make_config):
        registry = ModelRegistry()
        registry.register(Note, proxy_cls=NoteCollection)
        notes = Burrow(make_config(), registry).collection("Note")

        assert isinstance(notes, NoteCollection)
        assert notes.create_blank().text == ""

    def test_unknown_model(self, burrow):
        with pytest.raises(SetupError):
            burrow.collection("Nothing")
