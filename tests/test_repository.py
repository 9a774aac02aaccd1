import os

from conftest import write_artifact, write_form, INCOMPLETE_FORM

from specdev.artifacts.repository import ArtifactRepository, artifact_pattern
from specdev.artifacts.writers import write_artifact as persist
from specdev.stages import Stage

SECOND = 1_000_000_000
BASE = 1_700_000_000 * SECOND


def _repo(project):
    return ArtifactRepository(project / "specs", "requirements_form.md")


def test_latest_artifact_is_most_recently_modified(project):
    write_artifact(project, "design_20260101_100000.md", "first", BASE + 1 * SECOND)
    write_artifact(project, "design_20260101_090000.md", "third", BASE + 3 * SECOND)
    write_artifact(project, "design_20260101_110000.md", "second", BASE + 2 * SECOND)

    latest = _repo(project).find_latest(Stage.DESIGN)

    assert latest is not None
    assert latest.path.name == "design_20260101_090000.md"
    assert latest.read() == "third"


def test_mtime_ties_break_on_file_name(project):
    write_artifact(project, "design_20260101_100000.md", "a", BASE)
    write_artifact(project, "design_20260101_100001.md", "b", BASE)

    assert _repo(project).find_latest(Stage.DESIGN).path.name == "design_20260101_100001.md"


def test_intake_form_is_not_a_requirements_artifact(project):
    write_form(project)
    write_artifact(project, "requirements_notes.md", "not generated")

    repo = _repo(project)

    assert repo.find_latest(Stage.REQUIREMENTS) is None
    assert repo.list_artifacts(Stage.REQUIREMENTS) == []


def test_empty_latest_artifact_counts_as_absent(project):
    write_artifact(project, "requirements_20260101_100000.md", "content", BASE)
    write_artifact(project, "requirements_20260101_110000.md", "", BASE + SECOND)

    repo = _repo(project)

    assert repo.find_latest(Stage.REQUIREMENTS) is None
    assert repo.latest_candidate(Stage.REQUIREMENTS).path.name == "requirements_20260101_110000.md"


def test_missing_specs_directory(tmp_path):
    repo = ArtifactRepository(tmp_path / "specs", "requirements_form.md")

    assert repo.find_latest(Stage.DESIGN) is None
    assert not repo.has_intake()
    assert not repo.snapshot().intake_present


def test_other_stages_are_ignored(project):
    write_artifact(project, "implementation_20260101_100000.md", "plan")

    assert _repo(project).find_latest(Stage.DESIGN) is None


def test_snapshot_reflects_files(project):
    write_form(project, INCOMPLETE_FORM)
    write_artifact(project, "requirements_20260101_100000.md", "reqs")

    snapshot = _repo(project).snapshot()

    assert snapshot.intake_present
    assert not snapshot.intake_complete
    assert snapshot.has(Stage.REQUIREMENTS)
    assert not snapshot.has(Stage.DESIGN)
    assert snapshot.latest[Stage.IMPLEMENTATION] is None


def test_empty_form_counts_as_absent(project):
    write_form(project, "")

    assert not _repo(project).snapshot().intake_present


def test_pattern_accepts_collision_suffix():
    pattern = artifact_pattern("design")

    assert pattern.match("design_20260101_100000.md")
    assert pattern.match("design_20260101_100000_2.md")
    assert not pattern.match("design_prompt.md")
    assert not pattern.match("design_20260101_100000.md.bak")


def test_writer_never_overwrites(project, clock):
    moment = clock()
    specs = project / "specs"

    first = persist(specs, "design", "one", moment)
    second = persist(specs, "design", "two", moment)

    assert first.name == "design_20260314_092653.md"
    assert second.name == "design_20260314_092653_2.md"
    assert first.read_text(encoding="utf-8") == "one"
    assert second.read_text(encoding="utf-8") == "two"


def test_collision_suffix_sorts_after_original(project, clock):
    moment = clock()
    specs = project / "specs"
    persist(specs, "design", "one", moment)
    second = persist(specs, "design", "two", moment)
    for path in specs.iterdir():
        os.utime(path, ns=(BASE, BASE))

    assert _repo(project).find_latest(Stage.DESIGN).path == second


def test_double_digit_collision_suffix_is_latest(project):
    write_artifact(project, "design_20260101_100000_2.md", "second", BASE)
    write_artifact(project, "design_20260101_100000_10.md", "tenth", BASE)
    write_artifact(project, "design_20260101_100000.md", "first", BASE)

    history = _repo(project).list_artifacts(Stage.DESIGN)

    assert [a.path.name for a in history] == [
        "design_20260101_100000.md",
        "design_20260101_100000_2.md",
        "design_20260101_100000_10.md",
    ]


def test_undecodable_form_is_present_but_incomplete(project):
    (project / "specs" / "requirements_form.md").write_bytes(b"**Project Name:**\nCaf\xe9 Box\n")

    snapshot = _repo(project).snapshot()

    assert snapshot.intake_present
    assert not snapshot.intake_complete
