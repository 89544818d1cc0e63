import pytest
from webfilter_core import RecordContract, TransactionContext, FilterRecord, DEFAULT_SEED_TABLE
from webfilter_core.errors import (
    DuplicateKeyError, NotFoundError, InvalidKeyError, EncodingError, DecodingError,
    StoreReadError, StoreWriteError,
)
from webfilter_core.storage import InMemoryWorldState, StateEntry, StateIterator


def make_ctx(store=None):
    return TransactionContext(store if store is not None else InMemoryWorldState())


class BrokenStore(InMemoryWorldState):
    def __init__(self, fail_reads=False, fail_writes=False, fail_range=False):
        super().__init__()
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.fail_range = fail_range

    def get_state(self, key):
        if self.fail_reads:
            raise IOError("disk on fire")
        return super().get_state(key)

    def put_state(self, key, value):
        if self.fail_writes:
            raise IOError("read-only")
        super().put_state(key, value)

    def del_state(self, key):
        if self.fail_writes:
            raise IOError("read-only")
        super().del_state(key)

    def get_state_by_range(self, start_key, end_key):
        if self.fail_range:
            raise IOError("no cursor")
        return super().get_state_by_range(start_key, end_key)


class TrackingIterator(StateIterator):
    """Yields the given entries, then raises `fail_with` if set."""

    def __init__(self, entries, fail_with=None):
        self.entries = list(entries)
        self.fail_with = fail_with
        self.closed = False

    def has_next(self):
        return bool(self.entries) or self.fail_with is not None

    def next(self):
        if self.entries:
            return self.entries.pop(0)
        raise self.fail_with

    def close(self):
        self.closed = True


class ScanStore(InMemoryWorldState):
    def __init__(self, iterator):
        super().__init__()
        self.iterator = iterator

    def get_state_by_range(self, start_key, end_key):
        return self.iterator


def test_create_then_read_example():
    c, ctx = RecordContract(), make_ctx()
    c.create(ctx, "www.test.com", "", 5, "", 300)
    rec = c.read(ctx, "www.test.com")
    assert rec.to_dict() == {
        "allowlist": "www.test.com", "blocklist": "", "attribute2": 5,
        "attribute1": "", "webfilterlist": 300,
    }
    assert c.transfer(ctx, "www.test.com", "flag") == ""
    assert c.read(ctx, "www.test.com").attribute1 == "flag"


def test_missing_key_preconditions():
    c, ctx = RecordContract(), make_ctx()
    assert c.exists(ctx, "nope") is False
    with pytest.raises(NotFoundError):
        c.read(ctx, "nope")
    with pytest.raises(NotFoundError):
        c.update(ctx, "nope", "", 1, "", 1)
    with pytest.raises(NotFoundError):
        c.delete(ctx, "nope")
    with pytest.raises(NotFoundError):
        c.transfer(ctx, "nope", "x")
    assert ctx.stub.keys() == []


def test_create_duplicate_fails_and_keeps_original():
    c, ctx = RecordContract(), make_ctx()
    c.create(ctx, "k", "b", 1, "a", 2)
    with pytest.raises(DuplicateKeyError):
        c.create(ctx, "k", "other", 9, "z", 9)
    assert c.read(ctx, "k") == FilterRecord("k", "b", 1, "a", 2)


def test_update_replaces_every_field():
    c, ctx = RecordContract(), make_ctx()
    c.create(ctx, "k", "b", 1, "a", 2)
    c.update(ctx, "k", "b2", 10, "a2", 20)
    assert c.read(ctx, "k") == FilterRecord("k", "b2", 10, "a2", 20)


def test_update_with_bad_field_leaves_record_untouched():
    c, ctx = RecordContract(), make_ctx()
    c.create(ctx, "k", "b", 1, "a", 2)
    with pytest.raises(EncodingError):
        c.update(ctx, "k", "b2", "ten", "a2", 20)
    assert c.read(ctx, "k") == FilterRecord("k", "b", 1, "a", 2)


def test_transfer_touches_only_attribute1():
    c, ctx = RecordContract(), make_ctx()
    c.create(ctx, "k", "b", 1, "old", 2)
    assert c.transfer(ctx, "k", "new") == "old"
    assert c.read(ctx, "k") == FilterRecord("k", "b", 1, "new", 2)


def test_delete_is_not_idempotent():
    c, ctx = RecordContract(), make_ctx()
    c.create(ctx, "k", "", 1, "", 1)
    c.delete(ctx, "k")
    assert not c.exists(ctx, "k")
    with pytest.raises(NotFoundError):
        c.read(ctx, "k")
    with pytest.raises(NotFoundError):
        c.delete(ctx, "k")


def test_recreate_after_delete():
    c, ctx = RecordContract(), make_ctx()
    c.create(ctx, "k", "", 1, "", 1)
    c.delete(ctx, "k")
    c.create(ctx, "k", "x", 2, "y", 3)
    assert c.read(ctx, "k") == FilterRecord("k", "x", 2, "y", 3)


def test_initialize_then_get_all():
    c, ctx = RecordContract(), make_ctx()
    c.initialize(ctx)
    got = c.get_all(ctx)
    assert len(got) == 6
    assert {r.allowlist for r in got} == set(DEFAULT_SEED_TABLE.keys())
    assert sorted(got, key=lambda r: r.allowlist) == sorted(DEFAULT_SEED_TABLE, key=lambda r: r.allowlist)
    for key in DEFAULT_SEED_TABLE.keys():
        assert c.exists(ctx, key)


def test_initialize_overwrites_without_checking():
    c, ctx = RecordContract(), make_ctx()
    c.create(ctx, "www.google.com", "changed", 0, "x", 0)
    c.initialize(ctx)
    assert c.read(ctx, "www.google.com").blocklist == ""


def test_get_all_empty_store():
    it = TrackingIterator([])
    assert RecordContract().get_all(make_ctx(ScanStore(it))) == []
    assert it.closed


def test_get_all_closes_iterator_on_decode_error():
    it = TrackingIterator([
        StateEntry("a", FilterRecord("a").encode()),
        StateEntry("b", b"garbage"),
    ])
    with pytest.raises(DecodingError):
        RecordContract().get_all(make_ctx(ScanStore(it)))
    assert it.closed


def test_get_all_closes_iterator_on_scan_fault():
    it = TrackingIterator([StateEntry("a", FilterRecord("a").encode())], fail_with=IOError("lost peer"))
    with pytest.raises(StoreReadError):
        RecordContract().get_all(make_ctx(ScanStore(it)))
    assert it.closed


def test_get_all_scan_cannot_start():
    with pytest.raises(StoreReadError):
        RecordContract().get_all(make_ctx(BrokenStore(fail_range=True)))


def test_store_faults_are_typed():
    c = RecordContract()
    with pytest.raises(StoreReadError):
        c.exists(make_ctx(BrokenStore(fail_reads=True)), "k")
    with pytest.raises(StoreReadError):
        c.read(make_ctx(BrokenStore(fail_reads=True)), "k")
    with pytest.raises(StoreWriteError):
        c.create(make_ctx(BrokenStore(fail_writes=True)), "k", "", 1, "", 1)
    with pytest.raises(StoreWriteError):
        c.initialize(make_ctx(BrokenStore(fail_writes=True)))


def test_store_fault_is_chained():
    with pytest.raises(StoreReadError) as info:
        RecordContract().read(make_ctx(BrokenStore(fail_reads=True)), "k")
    assert isinstance(info.value.__cause__, IOError)


@pytest.mark.parametrize("key", ["", None, 5])
def test_invalid_keys_rejected(key):
    c, ctx = RecordContract(), make_ctx()
    with pytest.raises(InvalidKeyError):
        c.create(ctx, key, "", 1, "", 1)
    with pytest.raises(InvalidKeyError):
        c.exists(ctx, key)
    with pytest.raises(InvalidKeyError):
        c.read(ctx, key)


def test_operations_log(caplog):
    c, ctx = RecordContract(), make_ctx()
    with caplog.at_level("INFO", logger="WebFilter.Contract"):
        c.create(ctx, "k", "", 1, "", 1)
    assert "[CREATE] key=k" in caplog.text


def test_deeply_nested_value_is_a_decoding_error():
    store = InMemoryWorldState({"deep": b"[" * 100000 + b"]" * 100000})
    with pytest.raises(DecodingError):
        RecordContract().read(make_ctx(store), "deep")
