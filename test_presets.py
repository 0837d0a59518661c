import json

import pytest

from models import TraitSelection
from presets import (
    JsonFileStore,
    MemoryStore,
    PresetNotFoundError,
    PresetSnapshot,
    PresetStorageError,
    PresetStore,
)


def snapshot(*traits):
    return PresetSnapshot(
        dinosaurs=['velociraptor'],
        selected_colors=['#228B22'],
        selected_pattern='stripes',
        traits=TraitSelection(traits),
    )


def test_save_list_load_delete():
    presets = PresetStore(MemoryStore())

    first = presets.save("Raptor", snapshot('agile', 'sickle_claws'))
    second = presets.save("Tank", snapshot('armored'), description="slow but safe")

    assert [p.id for p in presets.list()] == [second.id, first.id]
    assert presets.load(first.id).traits.to_list() == ['agile', 'sickle_claws']
    assert presets.list()[0].description == "slow but safe"

    presets.delete(first.id)
    assert [p.id for p in presets.list()] == [second.id]

    with pytest.raises(PresetNotFoundError):
        presets.load(first.id)


def test_ids_are_unique():
    presets = PresetStore(MemoryStore())
    ids = {presets.save(f"P{i}", snapshot()).id for i in range(5)}
    assert len(ids) == 5


def test_oldest_presets_are_evicted_at_cap():
    presets = PresetStore(MemoryStore(), max_presets=3)
    saved = [presets.save(f"P{i}", snapshot()) for i in range(5)]

    names = [p.name for p in presets.list()]
    assert names == ["P4", "P3", "P2"]
    with pytest.raises(PresetNotFoundError):
        presets.load(saved[0].id)


def test_delete_unknown_id_is_noop():
    store = MemoryStore()
    presets = PresetStore(store)
    presets.save("Raptor", snapshot())
    before = store.get(presets.key)

    presets.delete("missing")
    assert store.get(presets.key) == before


def test_empty_name_rejected():
    with pytest.raises(ValueError):
        PresetStore(MemoryStore()).save("   ", snapshot())


def test_corrupt_store_reads_as_empty():
    store = MemoryStore({'dinosaur-presets': '{broken'})
    assert PresetStore(store).list() == []


def test_bad_entry_is_skipped_and_others_survive_next_save():
    store = MemoryStore()
    presets = PresetStore(store)
    for i in range(3):
        presets.save(f"P{i}", snapshot())

    stored = json.loads(store.get(presets.key))
    stored[1]['ageStage'] = 'hatchling'
    stored[2]['creatureSize'] = 'huge'
    stored.append(5)
    store.set(presets.key, json.dumps(stored))

    assert [p.name for p in presets.list()] == ["P2"]

    presets.save("new", snapshot())
    assert [p.name for p in presets.list()] == ["new", "P2"]


def test_write_failure_raises_storage_error():
    class FailingStore(MemoryStore):
        def set(self, key, value):
            raise OSError("disk full")

    with pytest.raises(PresetStorageError):
        PresetStore(FailingStore()).save("Raptor", snapshot())


def test_snapshot_round_trip_and_validation():
    original = snapshot('agile')
    assert PresetSnapshot.from_dict(original.to_dict()) == original

    with pytest.raises(ValueError):
        PresetSnapshot(age_stage='elderly')


def test_json_file_store_persists(tmp_path):
    path = tmp_path / "nested" / "store.json"
    presets = PresetStore(JsonFileStore(path))
    saved = presets.save("Raptor", snapshot('agile'))

    reopened = PresetStore(JsonFileStore(path))
    assert reopened.load(saved.id).traits.to_list() == ['agile']

    data = json.loads(path.read_text(encoding='utf-8'))
    assert 'dinosaur-presets' in data


def test_json_file_store_basic_ops(tmp_path):
    store = JsonFileStore(tmp_path / "store.json")
    assert store.get('missing') is None

    store.set('a', '1')
    store.set('b', '2')
    store.delete('a')
    assert store.keys() == ['b']


def test_json_file_store_ignores_unreadable_file(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("not json", encoding='utf-8')
    assert JsonFileStore(path).get('anything') is None
