from shared.cache import clear_all_caches, memoized


def test_memoized_runs_loader_once_and_keeps_none() -> None:
    calls: list[int] = []

    def loader():
        calls.append(1)
        return None

    assert memoized("test:none", loader) is None
    assert memoized("test:none", loader) is None
    assert len(calls) == 1


def test_clear_all_caches_forces_reload() -> None:
    assert memoized("test:value", lambda: "first") == "first"
    clear_all_caches()
    assert memoized("test:value", lambda: "second") == "second"
