from __future__ import annotations

import threading
from datetime import timezone

from services.clock import SystemClock, build_noise_source


def test_system_clock_is_utc_and_never_goes_backwards_across_threads() -> None:
    clock = SystemClock()
    readings: list[list] = [[] for _ in range(4)]

    def read(bucket: list) -> None:
        for _ in range(500):
            bucket.append(clock.now())

    threads = [threading.Thread(target=read, args=(bucket,)) for bucket in readings]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    for bucket in readings:
        assert len(bucket) == 500
        assert all(value.tzinfo is timezone.utc for value in bucket)
        assert all(a <= b for a, b in zip(bucket, bucket[1:]))


def test_noise_source_is_reproducible_for_a_seed() -> None:
    first = build_noise_source(9)
    second = build_noise_source(9)

    assert [first.uniform(-1, 1) for _ in range(3)] == [second.uniform(-1, 1) for _ in range(3)]
