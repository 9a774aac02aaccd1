import pytest

from specdev.config import PACKAGE_TEMPLATES_DIR
from specdev.errors import MissingPlaceholder, PreconditionMissing
from specdev.prompts.composer import compose, load_template
from specdev.stages import GENERATED_STAGES, Stage

MARKER = "[The design document will be inserted here by the script]"

TEMPLATES = [
    f"# Prompt\n\nIntro line\n\n{MARKER}\n\nOutro\n",
    f"{MARKER}\n",
    f"# Prompt\r\nBefore\r\n{MARKER}\r\nAfter\r\n",
    f"# No trailing newline\n{MARKER}",
    f"  indented {MARKER} with text around  \ntail\n",
]

UPSTREAMS = [
    "# Design\n\nBody text.\n",
    "single line without newline",
    "",
    "line one\nline two\n\n\n",
]


@pytest.mark.parametrize("template", TEMPLATES)
@pytest.mark.parametrize("upstream", UPSTREAMS)
def test_only_the_marker_line_changes(template, upstream):
    composed = compose(template, upstream, MARKER)

    lines = template.splitlines(keepends=True)
    index = next(i for i, line in enumerate(lines) if MARKER in line)
    before = "".join(lines[:index])
    after = "".join(lines[index + 1 :])

    assert composed.startswith(before)
    assert composed.endswith(after)
    assert composed[len(before) : len(composed) - len(after)].startswith(upstream)
    assert MARKER not in composed


def test_full_upstream_is_inserted():
    upstream = "# Design\n\n## Architecture\nThree tiers.\n"

    composed = compose(f"Top\n{MARKER}\nBottom\n", upstream, MARKER)

    assert composed == "Top\n# Design\n\n## Architecture\nThree tiers.\nBottom\n"


def test_line_ending_kept_when_upstream_lacks_one():
    assert compose(f"Top\n{MARKER}\nBottom\n", "inserted", MARKER) == "Top\ninserted\nBottom\n"


def test_missing_marker_is_fatal():
    with pytest.raises(MissingPlaceholder) as info:
        compose("# Prompt without marker\n", "doc", MARKER, "design_prompt.md")

    assert info.value.count == 0
    assert "design_prompt.md" in info.value.message


def test_duplicate_marker_is_fatal():
    with pytest.raises(MissingPlaceholder) as info:
        compose(f"{MARKER}\ntext\n{MARKER}\n", "doc", MARKER)

    assert info.value.count == 2


def test_intake_passes_through_unchanged():
    form = "**Project Name:**\nRecipe Box\n"

    assert compose(form, None, None) == form


@pytest.mark.parametrize("stage", GENERATED_STAGES)
def test_shipped_templates_have_exactly_one_marker(stage):
    template = (PACKAGE_TEMPLATES_DIR / stage.spec.template).read_text(encoding="utf-8")

    assert template.count(stage.spec.marker) == 1


def test_load_template_reports_missing_file(tmp_path):
    with pytest.raises(PreconditionMissing) as info:
        load_template(tmp_path / "design_prompt.md", Stage.DESIGN.spec.command)

    assert "design_prompt.md" in info.value.message
