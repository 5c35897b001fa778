# tests/test_task_store.py

from __future__ import annotations

import json
import os
import stat
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from task_tray.errors import AttachmentError, EmptyQueueError, FormatError, IndexOutOfRangeError, StorageError
from task_tray.tasks import task_store
from task_tray.tasks.task_models import AttachmentType, Task
from task_tray.tasks.task_store import QueueStore, load_tasks, save_tasks

_BASE = datetime(2024, 5, 1, 9, 30, tzinfo=timezone(timedelta(hours=3)))


def _task(name: str, **kwargs) -> Task:
    return Task(id=f"tsk_{name}", text=f"task {name}", created_at=_BASE, **kwargs)


def _ids(tasks: list[Task]) -> list[str]:
    return [t.id.removeprefix("tsk_") for t in tasks]


def _fill(store: QueueStore, *names: str) -> None:
    for n in names:
        store.enqueue(_task(n))


def test_load_missing_file_is_empty(tmp_path: Path) -> None:
    assert load_tasks(tmp_path / "nope.json") == []


def test_save_then_load_round_trip(tmp_path: Path) -> None:
    att = tmp_path / "pic.png"
    att.write_bytes(b"\x89PNG")
    tasks = [
        _task("A"),
        _task("B", attachment_path=str(att), attachment_type=AttachmentType.IMAGE),
        Task(id="tsk_C", text="юникод ✓", created_at=datetime.now().astimezone()),
    ]
    path = tmp_path / "queue.json"

    save_tasks(path, tasks)

    assert load_tasks(path) == tasks
    leftovers = [p.name for p in tmp_path.iterdir() if p.name.endswith(".tmp")]
    assert leftovers == []


def test_saved_document_shape(tmp_path: Path) -> None:
    path = tmp_path / "queue.json"
    save_tasks(path, [_task("A")])

    doc = json.loads(path.read_text("utf-8"))

    assert doc == {
        "tasks": [{"id": "tsk_A", "text": "task A", "created_at": "2024-05-01T09:30:00+03:00"}]
    }


def test_load_accepts_existing_queue_documents(tmp_path: Path) -> None:
    path = tmp_path / "queue.json"
    path.write_text(
        json.dumps(
            {
                "tasks": [
                    {"id": "tsk_1", "text": "a", "created_at": "2024-05-01T09:30:00.123456789+03:00"},
                    {
                        "id": "tsk_2",
                        "text": "b",
                        "created_at": "2024-05-01T09:31:00Z",
                        "attachment_path": "/x/y.bin",
                        "attachment_type": "video",
                    },
                    {"id": "tsk_3", "text": "c", "created_at": "2024-05-01T09:32:00Z", "attachment_type": "audio"},
                ]
            }
        ),
        "utf-8",
    )

    tasks = load_tasks(path)

    assert _ids(tasks) == ["1", "2", "3"]
    assert all(t.attachment_type is AttachmentType.NONE and t.attachment_path is None for t in tasks)


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "[]",
        '{"tasks": {}}',
        '{"tasks": [{"text": "no id", "created_at": "2024-01-01T00:00:00Z"}]}',
        '{"tasks": [{"id": "x", "text": "t", "created_at": "yesterday"}]}',
        '{"tasks": [{"id": "x", "text": "t", "created_at": "2024-01-01T00:00:00Z"},'
        ' {"id": "x", "text": "u", "created_at": "2024-01-01T00:00:00Z"}]}',
    ],
)
def test_load_malformed_raises_format_error(tmp_path: Path, content: str) -> None:
    path = tmp_path / "queue.json"
    path.write_text(content, "utf-8")

    with pytest.raises(FormatError):
        load_tasks(path)


def test_load_unreadable_raises_storage_error(tmp_path: Path) -> None:
    # A directory in place of the file cannot be read as text.
    path = tmp_path / "queue.json"
    path.mkdir()

    with pytest.raises(StorageError):
        load_tasks(path)


def test_save_into_missing_directory_raises_storage_error(tmp_path: Path) -> None:
    with pytest.raises(StorageError):
        save_tasks(tmp_path / "missing" / "queue.json", [_task("A")])


@pytest.mark.skipif(os.name == "nt", reason="directories cannot be fsynced on Windows")
def test_save_fsyncs_file_then_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    synced: list[bool] = []
    real_fsync = os.fsync

    def recording_fsync(fd: int) -> None:
        synced.append(stat.S_ISDIR(os.fstat(fd).st_mode))
        real_fsync(fd)

    monkeypatch.setattr(task_store.os, "fsync", recording_fsync)

    save_tasks(tmp_path / "queue.json", [_task("A")])

    assert synced == [False, True]


def test_end_to_end_enqueue_peek_skip_complete(store: QueueStore) -> None:
    assert store.peek() == (None, False)

    store.enqueue(_task("A"))
    assert store.peek() == (_task("A"), True)

    store.enqueue(_task("B"))
    assert _ids(store.get_all()) == ["A", "B"]

    store.skip()
    assert _ids(store.get_all()) == ["B", "A"]

    done = store.complete()
    assert done == _task("B")
    assert _ids(store.get_all()) == ["A"]
    assert _ids(load_tasks(store.path)) == ["A"]


def test_state_survives_restart(store: QueueStore) -> None:
    _fill(store, "A", "B", "C")
    store.move(2, 0)

    reopened = QueueStore(store.path)

    assert reopened.get_all() == store.get_all()
    assert _ids(reopened.get_all()) == ["C", "A", "B"]


@pytest.mark.parametrize("names", [[], ["A"]])
def test_skip_is_noop_for_short_queues(store: QueueStore, names: list[str]) -> None:
    _fill(store, *names)
    before = store.path.read_bytes() if store.path.exists() else None

    store.skip()

    assert _ids(store.get_all()) == names
    after = store.path.read_bytes() if store.path.exists() else None
    assert after == before


def test_skip_rotates_head_to_tail(store: QueueStore) -> None:
    _fill(store, "A", "B", "C", "D")

    store.skip()

    assert _ids(store.get_all()) == ["B", "C", "D", "A"]


def test_complete_on_empty_raises_and_writes_nothing(store: QueueStore) -> None:
    with pytest.raises(EmptyQueueError):
        store.complete()

    assert not store.path.exists()


@pytest.mark.parametrize(
    ("src", "dst", "expected"),
    [
        (2, 0, ["C", "A", "B"]),
        (0, 0, ["A", "B", "C"]),
        (0, 2, ["B", "C", "A"]),
        (1, 2, ["A", "C", "B"]),
        (2, 1, ["A", "C", "B"]),
    ],
)
def test_move(store: QueueStore, src: int, dst: int, expected: list[str]) -> None:
    _fill(store, "A", "B", "C")

    store.move(src, dst)

    assert _ids(store.get_all()) == expected
    assert _ids(load_tasks(store.path)) == expected


@pytest.mark.parametrize(("src", "dst"), [(-1, 0), (0, 3), (3, 0), (5, 5), (0, -1)])
def test_move_out_of_range_leaves_storage_unchanged(store: QueueStore, src: int, dst: int) -> None:
    _fill(store, "A", "B", "C")
    before = store.path.read_bytes()

    with pytest.raises(IndexOutOfRangeError):
        store.move(src, dst)

    assert _ids(store.get_all()) == ["A", "B", "C"]
    assert store.path.read_bytes() == before


def test_move_on_empty_queue_raises(store: QueueStore) -> None:
    with pytest.raises(IndexOutOfRangeError):
        store.move(0, 0)
    # IndexOutOfRangeError is also an IndexError.
    with pytest.raises(IndexError):
        store.move(0, 1)


def test_enqueue_duplicate_id_is_rejected(store: QueueStore) -> None:
    store.enqueue(_task("A"))

    with pytest.raises(ValueError):
        store.enqueue(_task("A"))

    assert _ids(store.get_all()) == ["A"]


def test_enqueue_requires_existing_attachment(store: QueueStore, tmp_path: Path) -> None:
    missing = _task("A", attachment_path=str(tmp_path / "gone.mp3"), attachment_type=AttachmentType.AUDIO)

    with pytest.raises(AttachmentError):
        store.enqueue(missing)

    assert store.get_all() == []


@pytest.mark.parametrize(
    ("path", "kind"),
    [("a.png", AttachmentType.NONE), (None, AttachmentType.IMAGE), ("", AttachmentType.AUDIO)],
)
def test_task_rejects_mismatched_attachment_fields(tmp_path: Path, path: str | None, kind: AttachmentType) -> None:
    if path:
        (tmp_path / path).write_bytes(b"\x89PNG")
        path = str(tmp_path / path)

    with pytest.raises(ValueError):
        _task("A", attachment_path=path, attachment_type=kind)


def test_enqueued_attachment_matches_disk(store: QueueStore, tmp_path: Path) -> None:
    att = tmp_path / "a.png"
    att.write_bytes(b"\x89PNG")

    store.enqueue(_task("A", attachment_path=str(att), attachment_type=AttachmentType.IMAGE))
    store.enqueue(_task("B"))

    assert store.get_all() == load_tasks(store.path)


def test_failed_save_rolls_back_memory(store: QueueStore, monkeypatch: pytest.MonkeyPatch) -> None:
    _fill(store, "A", "B")
    before = store.path.read_bytes()

    def broken_save(path, tasks):
        raise StorageError("disk full")

    monkeypatch.setattr(task_store, "save_tasks", broken_save)

    with pytest.raises(StorageError):
        store.enqueue(_task("C"))
    with pytest.raises(StorageError):
        store.skip()
    with pytest.raises(StorageError):
        store.complete()
    with pytest.raises(StorageError):
        store.move(0, 1)

    assert _ids(store.get_all()) == ["A", "B"]
    assert store.path.read_bytes() == before


def test_reload_picks_up_disk_changes(store: QueueStore) -> None:
    _fill(store, "A")
    save_tasks(store.path, [_task("Z")])

    store.reload()

    assert _ids(store.get_all()) == ["Z"]


def test_concurrent_enqueue_and_complete_are_linearizable(store: QueueStore) -> None:
    for round_no in range(20):
        head = _task(f"head{round_no}")
        new = _task(f"new{round_no}")
        store.enqueue(head)
        barrier = threading.Barrier(2)
        completed: list[Task] = []

        def do_enqueue() -> None:
            barrier.wait()
            store.enqueue(new)

        def do_complete() -> None:
            barrier.wait()
            completed.append(store.complete())

        threads = [threading.Thread(target=do_enqueue), threading.Thread(target=do_complete)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        # Either order removes the old head and leaves only the new task.
        assert completed == [head]
        assert store.get_all() == [new]
        assert load_tasks(store.path) == [new]
        store.complete()


def test_many_threads_never_lose_updates(store: QueueStore) -> None:
    def worker(prefix: str) -> None:
        for i in range(10):
            store.enqueue(_task(f"{prefix}{i}"))

    threads = [threading.Thread(target=worker, args=(p,)) for p in "wxyz"]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert store.count() == 40
    assert len(load_tasks(store.path)) == 40
