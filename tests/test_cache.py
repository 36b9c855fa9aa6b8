import threading
import time

from qris_service.cache import ArtifactCache


def test_get_returns_payload_before_expiry(cache, clock):
    artifact_id = cache.put(b"png-bytes")

    clock.advance(299.999)
    assert cache.get(artifact_id) == b"png-bytes"


def test_get_misses_at_and_after_expiry_without_sweep(cache, clock):
    artifact_id = cache.put(b"png-bytes")

    clock.advance(300)
    assert cache.get(artifact_id) is None
    clock.advance(1000)
    assert cache.get(artifact_id) is None
    # lazy miss leaves eviction to the sweep
    assert len(cache) == 1


def test_unknown_id_misses(cache):
    assert cache.get("does-not-exist") is None


def test_per_entry_ttl_overrides_default(cache, clock):
    short = cache.put(b"a", ttl=10)
    default = cache.put(b"b")

    clock.advance(10)
    assert cache.get(short) is None
    assert cache.get(default) == b"b"


def test_sweep_evicts_only_expired_entries(cache, clock):
    old = cache.put(b"old", ttl=30)
    clock.advance(20)
    fresh = cache.put(b"fresh", ttl=30)
    clock.advance(10)

    assert cache.sweep() == 1
    assert len(cache) == 1
    assert cache.get(old) is None
    assert cache.get(fresh) == b"fresh"


def test_ten_thousand_ids_are_unique(cache):
    ids = {cache.put(b"x") for _ in range(10000)}

    assert len(ids) == 10000


def test_max_entries_evicts_oldest(clock):
    cache = ArtifactCache(ttl=300, max_entries=2, clock=clock)
    first = cache.put(b"1")
    second = cache.put(b"2")
    third = cache.put(b"3")

    assert len(cache) == 2
    assert cache.get(first) is None
    assert cache.get(second) == b"2"
    assert cache.get(third) == b"3"


def test_concurrent_puts_and_sweeps(clock):
    cache = ArtifactCache(ttl=300, clock=clock)
    ids = []
    lock = threading.Lock()

    def writer():
        for _ in range(500):
            artifact_id = cache.put(b"x")
            with lock:
                ids.append(artifact_id)

    def sweeper():
        for _ in range(200):
            cache.sweep()

    threads = [threading.Thread(target=writer) for _ in range(4)]
    threads.append(threading.Thread(target=sweeper))
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(set(ids)) == 2000
    assert len(cache) == 2000


def test_background_sweep_lifecycle():
    cache = ArtifactCache(ttl=0.01, sweep_interval=0.01)
    cache.put(b"x")

    cache.start_sweep()
    try:
        assert cache.sweeping
        deadline = time.monotonic() + 2
        while len(cache) and time.monotonic() < deadline:
            time.sleep(0.01)
        assert len(cache) == 0
    finally:
        cache.stop_sweep(timeout=1)

    assert not cache.sweeping


def test_start_sweep_is_idempotent(cache):
    cache.start_sweep()
    thread = cache._thread
    cache.start_sweep()
    try:
        assert cache._thread is thread
    finally:
        cache.stop_sweep(timeout=1)
