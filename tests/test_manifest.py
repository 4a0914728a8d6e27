from flightlink.protocol import Manifest, ManifestRegistry, StateEntry, StateKind, parse_manifest


def test_manifest_is_sorted_and_indexed():
    manifest = parse_manifest("5,1,Throttle\n2,4,Callsign\n")

    assert list(manifest) == [
        StateEntry(id=2, kind=StateKind.STRING, name="Callsign"),
        StateEntry(id=5, kind=StateKind.INT, name="Throttle"),
    ]
    assert manifest.find_by_id(2).name == "Callsign"
    assert manifest.find_by_name("Throttle").id == 5
    assert manifest.find_by_id(99) is None
    assert manifest.find_by_name("Missing") is None


def test_malformed_lines_are_skipped():
    manifest = parse_manifest("5,1,Throttle\n6,2\n")
    assert len(manifest) == 1
    assert manifest.find_by_id(5).name == "Throttle"
    assert manifest.find_by_id(6) is None


def test_non_integer_fields_are_skipped():
    text = "a,1,Alpha\n3,x,Bravo\n4,1.5,Charlie\n 7,1,Delta\n9999999999,1,Echo\n8,0,Foxtrot"
    manifest = parse_manifest(text)
    assert [entry.name for entry in manifest] == ["Foxtrot"]


def test_empty_manifest():
    assert len(parse_manifest("")) == 0
    assert len(parse_manifest("\n\n")) == 0
    assert not parse_manifest("garbage")


def test_type_tags_map_to_kinds():
    manifest = parse_manifest("1,-1,Gear\n2,3,Altitude\n3,5,Ticks\n4,9,Mystery\n5,0,Lights")
    assert manifest.find_by_id(1).kind is StateKind.COMMAND
    assert manifest.find_by_id(2).kind is StateKind.DOUBLE
    assert manifest.find_by_id(3).kind is StateKind.LONG
    assert manifest.find_by_id(4).kind is StateKind.UNKNOWN
    assert manifest.find_by_id(5).kind is StateKind.BOOL


def test_name_keeps_everything_after_type_column():
    manifest = parse_manifest("4,4,aircraft/0/name,extra\n")
    assert manifest.find_by_id(4).name == "aircraft/0/name,extra"


def test_duplicate_names_resolve_to_later_entry():
    manifest = parse_manifest("3,2,Same\n1,1,Same\n")
    assert manifest.find_by_name("Same").id == 3
    assert manifest.find_by_id(1).kind is StateKind.INT
    assert manifest.find_by_id(3).kind is StateKind.FLOAT


def test_duplicate_ids_stay_in_sequence():
    manifest = parse_manifest("2,1,First\n2,3,Second\n")
    assert len(manifest) == 2
    assert manifest.find_by_id(2).name in {"First", "Second"}
    assert manifest.find_by_name("First").id == 2
    assert manifest.find_by_name("Second").id == 2


def test_lookup_over_large_manifest():
    text = "\n".join(f"{state_id},1,state{state_id}" for state_id in range(0, 2000, 2))
    manifest = parse_manifest(text)
    assert len(manifest) == 1000
    assert manifest.find_by_id(0).name == "state0"
    assert manifest.find_by_id(1998).name == "state1998"
    assert manifest.find_by_id(777) is None
    assert manifest.find_by_id(-5) is None
    assert manifest.find_by_id(5000) is None


def test_registry_rebuild_replaces_snapshot():
    registry = ManifestRegistry()
    assert len(registry.snapshot) == 0

    first = registry.rebuild("1,1,Old\n")
    second = registry.rebuild("2,0,New\n")

    assert registry.snapshot is second
    assert registry.find_by_id(1) is None
    assert registry.find_by_name("New").id == 2
    assert first.find_by_name("Old").id == 1

    registry.clear()
    assert registry.find_by_id(2) is None


def test_manifest_from_entries():
    manifest = Manifest([StateEntry(id=9, name="B", kind=StateKind.BOOL), StateEntry(id=1, name="A", kind=1)])
    assert manifest.ids == (1, 9)
    assert manifest.find_by_id(1).kind is StateKind.INT
