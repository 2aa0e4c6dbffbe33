from pathlib import Path

from chunkflow.stages.naming import make_descriptors


def test_remote_names_follow_prefix_and_index():
    paths = [Path("c/chunk-00.bin"), Path("c/chunk-01.bin"), Path("c/chunk-02.bin")]

    descriptors = make_descriptors("four-gig-demo", paths)

    assert [d.remote_name for d in descriptors] == [
        "four-gig-demo-00.bin",
        "four-gig-demo-01.bin",
        "four-gig-demo-02.bin",
    ]
    assert [d.local_path for d in descriptors] == paths


def test_naming_is_deterministic():
    paths = [f"chunk-{i:02d}.bin" for i in range(12)]
    assert make_descriptors("p", paths) == make_descriptors("p", paths)


def test_index_is_list_position_not_file_name():
    descriptors = make_descriptors("p", ["b.bin", "a.bin"])
    assert [(d.local_path.name, d.remote_name) for d in descriptors] == [("b.bin", "p-00.bin"), ("a.bin", "p-01.bin")]


def test_wide_counts_pad_to_three_digits():
    descriptors = make_descriptors("p", [f"f{i}" for i in range(101)])
    assert descriptors[0].remote_name == "p-000.bin"
    assert descriptors[100].remote_name == "p-100.bin"


def test_empty_input():
    assert make_descriptors("p", []) == []
