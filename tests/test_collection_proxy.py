"""
Tests for CollectionProxy and the self-service methods Documents delegate to it.
"""

import gc
import threading

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from burrow import (
    Burrow,
    CollectionProxy,
    DetachedDocumentError,
    Document,
    IndexSpec,
    SchemaConfig,
    SetupError,
    StoreError,
    SyncError,
    ValidationError,
)

from .conftest import BlogPost, Mood, Person


class TestCreateAndFind:
    """Test inserting and retrieving documents"""

    def test_create_assigns_id(self, people):
        person = people.create(name="John")
        assert isinstance(person._id, ObjectId)
        assert person.collection is people
        assert person.removed is False

    def test_create_from_mapping(self, people):
        person = people.create({"name": "John", "likes": 4})
        assert person.likes == 4

    def test_create_with_explicit_id(self, people):
        person = people.create(name="John", _id="john")
        assert person._id == "john"
        assert people.find_id("john") == person

    def test_create_duplicate_id(self, people):
        people.create(name="John", _id="john")
        with pytest.raises(DuplicateKeyError):
            people.create(name="Other John", _id="john")

    def test_driver_errors_are_store_errors(self, people):
        people.create(name="John", _id="john")
        with pytest.raises(StoreError):
            people.create(name="John", _id="john")

    def test_find_id(self, people):
        person = people.create(name="John")
        found = people.find_id(person._id)
        assert found == person
        assert found is not person

    def test_find_id_from_hex_string(self, people):
        person = people.create(name="John")
        assert people.find_id(str(person._id)) == person

    def test_find_id_missing(self, people):
        assert people.find_id(ObjectId()) is None

    def test_find_one(self, people):
        people.create(name="John", likes=1)
        people.create(name="Jane", likes=2)
        assert people.find_one({"likes": 2}).name == "Jane"
        assert people.find_one({"likes": 3}) is None

    def test_count(self, people):
        people.create(name="John", likes=1)
        people.create(name="Jane", likes=2)
        assert people.count() == 2
        assert people.count({"likes": {"$gt": 1}}) == 1

    def test_custom_collection_name(self, burrow):
        posts = burrow.collection("Post")
        post = posts.create(title="Hello")
        assert posts.collection_name == "posts"
        assert burrow.connection_manager.get_collection_handle("posts").count_documents({"_id": post._id}) == 1

    def test_documents_reference_proxy_weakly(self, burrow):
        proxy = CollectionProxy(Person, burrow.connection_manager)
        person = proxy.create(name="John")
        del proxy
        gc.collect()
        with pytest.raises(DetachedDocumentError):
            person.sync()

    def test_proxy_equality(self, burrow):
        first = CollectionProxy(Person, burrow.connection_manager)
        second = CollectionProxy(Person, burrow.connection_manager, "person")
        assert first == second
        assert hash(first) == hash(second)
        assert first != CollectionProxy(Person, burrow.connection_manager, "other")

    def test_proxy_requires_document_class(self, burrow):
        with pytest.raises(SetupError):
            CollectionProxy(dict, burrow.connection_manager)

    def test_wrong_instance_type(self, burrow, people):
        post = burrow.collection("Post").create(title="Hello")
        with pytest.raises(TypeError):
            people.sync(post)


class TestEnsureIndexes:
    """Test index creation from __indexes__"""

    def test_ensure_indexes(self, people):
        assert people.ensure_indexes() is True
        assert "name_1" in people.connection_manager.get_collection_handle("person").index_information()

    def test_ensure_indexes_is_idempotent(self, people):
        people.ensure_indexes()
        assert people.ensure_indexes() is True

    def test_unique_index_enforced(self, burrow):
        class Account(Person):
            __indexes__ = (IndexSpec("name", unique=True), )

        accounts = CollectionProxy(Account, burrow.connection_manager)
        accounts.ensure_indexes()
        accounts.create(name="John")
        with pytest.raises(DuplicateKeyError):
            accounts.create(name="John")

    def test_no_indexes_declared(self, burrow):
        assert burrow.collection("Post").ensure_indexes() is True


class TestUpdate:
    """Test atomic updates and in-memory sync"""

    def test_update_raw_directive(self, people):
        person = people.create(name="John")
        assert person.update({"$set": {"name": "Johnny"}, "$inc": {"likes": 2}}) is True
        assert person.name == "Johnny"
        assert person.likes == 2

    def test_update_set(self, people):
        person = people.create(name="John")
        assert person.update_set("name", "Johnny") is True
        assert person.name == "Johnny"
        assert people.find_id(person._id).name == "Johnny"

    def test_update_set_by_field_schema(self, people):
        person = people.create(name="John")
        person.update_set(Person.likes, 10)
        assert person.likes == 10

    def test_update_inc(self, people):
        person = people.create(name="John")
        person.update_inc("likes")
        person.update_inc(Person.likes, 5)
        assert person.likes == 6
        assert people.find_id(person._id).likes == 6

    def test_update_inc_rejects_non_numbers(self, people):
        person = people.create(name="John")
        with pytest.raises(TypeError):
            person.update_inc("likes", "1")
        with pytest.raises(TypeError):
            person.update_inc("likes", True)

    def test_update_unknown_field(self, people):
        person = people.create(name="John")
        with pytest.raises(SetupError):
            person.update_set("age", 3)

    def test_update_extra_field(self, people):
        person = people.create(name="John", nickname="Johnny")
        person.update_set("nickname", "J")
        assert person.nickname == "J"

    def test_update_push(self, people):
        person = people.create(name="John")
        person.update_push("tags", "hot")
        person.update_push("tags", ["trendy", "hot"])
        assert person.tags == ["hot", "trendy", "hot"]

    def test_update_add(self, people):
        person = people.create(name="John", tags=["hot"])
        person.update_add("tags", ["hot", "trendy"])
        assert person.tags == ["hot", "trendy"]

    def test_update_pop(self, people):
        person = people.create(name="John", tags=["a", "b", "c"])
        person.update_pop("tags")
        assert person.tags == ["a", "b"]
        person.update_pop("tags", first=True)
        assert person.tags == ["b"]

    def test_update_pull(self, people):
        person = people.create(name="John", tags=["a", "b", "a"])
        person.update_pull("tags", "a")
        assert person.tags == ["b"]

    def test_update_unset_restores_default(self, people):
        person = people.create(name="John", likes=3)
        person.update_unset("likes")
        assert person.likes == 0
        assert "likes" not in people.connection_manager.get_collection_handle("person").find_one({"_id": person._id})

    def test_update_removed_record(self, people):
        person = people.create(name="John")
        people.connection_manager.get_collection_handle("person").delete_one({"_id": person._id})

        assert person.update_inc("likes") is False
        assert person.removed is True
        assert person.likes == 0

    def test_concurrent_increments(self, make_config, registry, people):
        """Writers on separate connections never lose an increment"""
        increments = 50
        person_id = people.create(name="John")._id
        errors = []

        def increment_many():
            try:
                writer = Burrow(make_config(), registry).collection("Person")
                person = writer.find_id(person_id)
                for _ in range(increments):
                    person.update_inc("likes")
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=increment_many) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert people.find_id(person_id).likes == 2 * increments

    def test_interleaved_increments(self, make_config, registry):
        first = Burrow(make_config(), registry).collection("Person")
        second = Burrow(make_config(), registry).collection("Person")

        mine = first.create(name="John")
        theirs = second.find_id(mine._id)

        mine.update_inc("likes")
        theirs.update_inc("likes")
        assert theirs.likes == 2

        mine.update_inc("likes")
        assert mine.likes == 3

    def test_update_picks_up_other_writers(self, people):
        person = people.create(name="John")
        other = people.find_id(person._id)
        other.update_push("tags", "hot")

        person.update_inc("likes")
        assert person.tags == ["hot"]

    def test_invalid_result_raises_sync_error(self, people):
        person = people.create(name="John")
        with pytest.raises(SyncError) as exc_info:
            person.update({"$set": {"likes": "many"}})

        assert exc_info.value.document_id == person._id
        assert person.likes == 0


class TestUpdateValidation:
    """Test that update helpers refuse values the declared fields cannot hold"""

    def stored(self, people, person):
        return people.connection_manager.get_collection_handle("person").find_one({"_id": person._id})

    def test_set_wrong_type(self, people):
        person = people.create(name="John")
        with pytest.raises(ValidationError):
            person.update_set("likes", "many")

        assert self.stored(people, person)["likes"] == 0
        assert people.find_id(person._id).likes == 0

    def test_set_runs_validation_func(self, burrow):
        def not_empty(value):
            if not value:
                raise ValidationError("Title cannot be empty.")

        class Headline(Document):
            title: str = SchemaConfig(default="untitled", validation_func=not_empty)

        headlines = CollectionProxy(Headline, burrow.connection_manager)
        headline = headlines.create()
        with pytest.raises(ValidationError):
            headline.update_set("title", "")
        assert headlines.find_id(headline._id).title == "untitled"

    def test_push_wrong_element_type(self, people):
        person = people.create(name="John", tags=["a"])
        with pytest.raises(ValidationError):
            person.update_push("tags", ["b", 3])
        with pytest.raises(ValidationError):
            person.update_add(Person.tags, 3)

        assert self.stored(people, person)["tags"] == ["a"]
        assert people.find_id(person._id).tags == ["a"]

    def test_push_enum_elements(self, burrow):
        class Diary(Document):
            moods: list[Mood] = SchemaConfig(default_factory=list)

        diaries = CollectionProxy(Diary, burrow.connection_manager)
        diary = diaries.create()
        diary.update_push("moods", [Mood.HAPPY, Mood.GRUMPY])
        assert diary.moods == [Mood.HAPPY, Mood.GRUMPY]
        with pytest.raises(ValidationError):
            diary.update_push("moods", "sleepy")

    def test_push_to_non_array(self, people):
        person = people.create(name="John")
        with pytest.raises(ValidationError):
            person.update_push("name", "x")
        with pytest.raises(ValidationError):
            person.update_pop("likes")

    def test_inc_non_numeric_field(self, people):
        person = people.create(name="John")
        with pytest.raises(ValidationError):
            person.update_inc("name")

    def test_inc_int_field_by_float(self, people):
        person = people.create(name="John")
        with pytest.raises(ValidationError):
            person.update_inc("likes", 0.5)
        assert self.stored(people, person)["likes"] == 0

    def test_inc_float_field(self, burrow):
        post = burrow.collection("Post").create(title="Hello")
        post.update_inc("score", 0.5)
        post.update_inc("score", 2)
        assert post.score == 2.5

    def test_unset_required_field(self, people):
        person = people.create(name="John")
        with pytest.raises(ValidationError):
            person.update_unset("name")
        assert people.find_id(person._id).name == "John"

    def test_extra_fields_not_checked(self, people):
        person = people.create(name="John", nickname="Johnny")
        person.update_set("nickname", 7)
        assert person.nickname == 7


class TestSync:
    """Test refreshing from the store"""

    def test_sync(self, people):
        person = people.create(name="John")
        people.connection_manager.get_collection_handle("person").update_one({"_id": person._id}, {"$set": {"likes": 9}})

        assert person.likes == 0
        assert person.sync() is True
        assert person.likes == 9

    def test_sync_replaces_extra_fields(self, people):
        person = people.create(name="John", nickname="Johnny")
        handle = people.connection_manager.get_collection_handle("person")
        handle.update_one({"_id": person._id}, {"$unset": {"nickname": ""}, "$set": {"age": 40}})

        person.sync()
        assert person.extra_fields() == {"age": 40}
        assert not hasattr(person, "nickname")

    def test_sync_removed_record(self, people):
        person = people.create(name="John")
        people.connection_manager.get_collection_handle("person").delete_one({"_id": person._id})

        assert person.sync() is False
        assert person.removed is True

    def test_sync_malformed_record(self, people):
        person = people.create(name="John", tags=["a"])
        people.connection_manager.get_collection_handle("person").update_one(
            {"_id": person._id}, {"$set": {"likes": "many", "name": "Johnny"}}
        )

        with pytest.raises(SyncError) as exc_info:
            person.sync()

        assert exc_info.value.__cause__ is not None
        assert person.name == "John"
        assert person.likes == 0
        assert person.tags == ["a"]
        assert person.removed is False


class TestRemoveAndReinsert:
    """Test deleting and restoring records"""

    def test_remove(self, people):
        person = people.create(name="John")
        assert person.remove() is True
        assert person.removed is True
        assert people.find_id(person._id) is None
        assert person.name == "John"

    def test_remove_twice(self, people):
        person = people.create(name="John")
        person.remove()
        assert person.remove() is True
        assert person.removed is True

    def test_reinsert(self, people):
        person = people.create(name="John", likes=2)
        person.remove()

        assert person.reinsert() is True
        assert person.removed is False
        assert people.find_id(person._id) == person

    def test_reinsert_overwrites_newer_state(self, people):
        person = people.create(name="John")
        people.connection_manager.get_collection_handle("person").update_one({"_id": person._id}, {"$set": {"likes": 5}})

        person.reinsert()
        assert people.find_id(person._id).likes == 0

    def test_reinsert_unsaved_document(self, people):
        person = Person(name="John")
        assert people.reinsert(person) is True
        assert person._id is not None
        assert person.collection is people
        assert people.count() == 1

    def test_sync_after_remove_and_reinsert(self, people):
        person = people.create(name="John")
        person.remove()
        person.reinsert()
        assert person.sync() is True
        assert person.removed is False
