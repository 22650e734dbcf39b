"""Tests for the reconciliation loop."""
from paramfilter import (
    FieldCodec, FieldSchema, MemoryParamStore, Reconciler, ReconcilerState, ValueCache,
)


def make_reconciler(schema, store, subscribe=True):
    reconciler = Reconciler(schema, store)
    if subscribe:
        store.subscribe(reconciler.on_store_change)
    return reconciler


class TestInitialization:

    def test_defaults_written_in_one_mutation(self, location_schema, store, recorder):
        store.subscribe(recorder)
        reconciler = make_reconciler(location_schema, store, subscribe=False)

        reconciler.reconcile()

        assert reconciler.initialized
        assert store.to_snapshot() == [("page", "1"), ("open", "false")]
        assert recorder.count == 1

    def test_present_values_seed_cache(self, location_schema):
        store = MemoryParamStore({"country": "es", "page": "3", "tags": "a,b"})
        reconciler = make_reconciler(location_schema, store)

        reconciler.reconcile()

        cache = reconciler.cache
        assert cache.get("country") == "es"
        assert cache.get("page") == 3
        assert cache.get("tags") == ["a", "b"]
        assert cache.get("open") is False
        assert cache.get("region") is None
        assert store.get("page") == "3"

    def test_no_invalidation_on_first_pass(self, location_schema):
        store = MemoryParamStore({"country": "es", "region": "madrid", "city": "alcala"})
        reconciler = make_reconciler(location_schema, store)

        reconciler.reconcile()

        assert store.get("region") == "madrid"
        assert store.get("city") == "alcala"

    def test_empty_serialized_default_not_written(self, store):
        schema = FieldSchema([
            {"name": "q", "type": "string", "defaultValue": ""},
            {"name": "tags", "type": "array", "defaultValue": []},
            {"name": "sub", "dependsOn": ["q", "tags"]},
        ])
        store.set("sub", "x")
        reconciler = make_reconciler(schema, store)

        reconciler.reconcile()
        reconciler.reconcile()

        assert store.to_snapshot() == [("sub", "x")]

    def test_follow_up_pass_runs_after_default_write(self, location_schema, store):
        reconciler = make_reconciler(location_schema, store)

        reconciler.reconcile()

        # initial pass plus the pass observing the batched default write
        assert reconciler.passes == 2


class TestInvalidation:

    def setup_store(self, schema, items):
        store = MemoryParamStore(items)
        reconciler = make_reconciler(schema, store)
        reconciler.reconcile()
        return store, reconciler

    def test_change_clears_dependent(self, location_schema):
        store, reconciler = self.setup_store(location_schema, {"country": "es", "region": "madrid"})

        store.set("country", "fr")

        assert store.get("region") is None
        assert reconciler.cache.get("country") == "fr"

    def test_same_value_does_not_clear(self, location_schema):
        store, _ = self.setup_store(location_schema, {"country": "es", "region": "madrid"})

        store.set("country", "es")
        store.set("page", "4")

        assert store.get("region") == "madrid"

    def test_transition_to_absent_clears(self, location_schema):
        store, _ = self.setup_store(location_schema, {"country": "es", "region": "madrid"})

        store.delete("country")

        assert store.get("region") is None

    def test_transition_from_absent_clears(self, location_schema):
        store, _ = self.setup_store(location_schema, {"region": "madrid"})

        store.set("country", "es")

        assert store.get("region") is None

    def test_chain_cleared_one_level_per_pass(self, location_schema):
        store = MemoryParamStore({"country": "es", "region": "madrid", "city": "alcala"})
        reconciler = make_reconciler(location_schema, store, subscribe=False)
        reconciler.reconcile()

        store.set("country", "fr")
        reconciler.reconcile()
        assert store.get("region") is None
        assert store.get("city") == "alcala"
        assert reconciler.last_cleared == ("region",)
        assert reconciler.cache.is_cleared("region")

        reconciler.reconcile()
        assert store.get("city") is None
        assert reconciler.last_cleared == ("city",)
        assert not reconciler.cache.is_cleared("region")

        reconciler.reconcile()
        assert reconciler.last_cleared == ()
        assert reconciler.cache.cleared == ()

    def test_chain_settles_through_notifications(self, location_schema):
        store, _ = self.setup_store(
            location_schema, {"country": "es", "region": "madrid", "city": "alcala"}
        )

        store.set("country", "fr")

        assert store.to_snapshot() == [("country", "fr"), ("page", "1"), ("open", "false")]

    def test_simultaneous_changes_in_one_transition(self, location_schema):
        store, _ = self.setup_store(
            location_schema, {"country": "es", "region": "madrid", "city": "alcala"}
        )

        store.update({"country": "fr", "region": "paris"})

        assert store.get("region") is None
        assert store.get("city") is None

    def test_deletions_committed_together(self, recorder):
        schema = FieldSchema([
            {"name": "a"},
            {"name": "b", "dependsOn": ["a"]},
            {"name": "c", "dependsOn": ["a"]},
        ])
        store = MemoryParamStore({"a": "1", "b": "2", "c": "3"})
        reconciler = make_reconciler(schema, store)
        reconciler.reconcile()
        store.subscribe(recorder)
        version = store.version

        store.set("a", "9")

        # the write itself, then one combined deletion
        assert store.version == version + 2
        assert recorder.count == 2
        assert store.to_snapshot() == [("a", "9")]

    def test_array_values_compared_by_value(self):
        schema = FieldSchema([
            {"name": "tags", "type": "array"},
            {"name": "pick", "dependsOn": ["tags"]},
        ])
        store = MemoryParamStore({"tags": "a,b", "pick": "a"})
        reconciler = make_reconciler(schema, store)
        reconciler.reconcile()

        reconciler.reconcile()
        store.update({"pick": "b"})

        assert store.get("pick") == "b"

    def test_idempotent_pass(self, location_schema):
        store, reconciler = self.setup_store(
            location_schema, {"country": "es", "region": "madrid"}
        )
        before_store = store.to_snapshot()
        before_cache = reconciler.cache.as_dict()
        version = store.version

        reconciler.reconcile()
        reconciler.reconcile()

        assert store.to_snapshot() == before_store
        assert reconciler.cache.as_dict() == before_cache
        assert store.version == version

    def test_outside_navigation_tolerated(self, location_schema):
        store, _ = self.setup_store(location_schema, {"country": "es", "region": "madrid"})

        store.replace({"country": "it", "region": "lazio", "page": "2"})

        assert store.to_snapshot() == [("country", "it"), ("page", "2")]

    def test_dependency_cycle_keeps_clearing_when_allowed(self):
        schema = FieldSchema(
            [{"name": "a", "dependsOn": ["b"]}, {"name": "b", "dependsOn": ["a"]}],
            allow_cycles=True,
        )
        store = MemoryParamStore({"a": "1", "b": "2"})
        reconciler = make_reconciler(schema, store)
        reconciler.reconcile()

        store.set("a", "5")

        assert store.to_snapshot() == []


class TestReset:

    def test_reset_reinitializes(self, location_schema, store):
        reconciler = make_reconciler(location_schema, store)
        reconciler.reconcile()
        store.delete("page")

        reconciler.reset()
        assert reconciler.state is ReconcilerState.UNINITIALIZED
        assert len(reconciler.cache) == 0

        reconciler.reconcile()
        assert store.get("page") == "1"


def test_custom_codec_and_cache():
    schema = FieldSchema([
        {"name": "tags", "type": "array", "defaultValue": ["a,b", "c"]},
        {"name": "pick", "dependsOn": ["tags"]},
    ])
    store = MemoryParamStore({"pick": "c"})
    cache = ValueCache()
    reconciler = Reconciler(schema, store, FieldCodec(escape=True), cache)
    store.subscribe(reconciler.on_store_change)

    reconciler.reconcile()

    assert store.get("tags") == "a%2Cb,c"
    assert cache.get("tags") == ["a,b", "c"]
    assert store.get("pick") == "c"
