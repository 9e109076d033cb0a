"""Tests for release notes generation and the changelog."""

import pytest

from gitagent.models import ReleaseNotes
from gitagent.release_notes import ReleaseNotesGenerator, categorize


def test_categorize_is_exclusive():
    features, fixes, other = categorize(
        ["- feat: a (1)", "- fix: b (2)", "- feat: fix c (3)", "- docs: d (4)"]
    )
    assert features == ["- feat: a (1)", "- feat: fix c (3)"]
    assert fixes == ["- fix: b (2)"]
    assert other == ["- docs: d (4)"]


def test_render_only_non_empty_sections():
    notes = ReleaseNotes(version="1.3.0", features=["- feat: a (abc1234)"])
    assert notes.render() == "# 1.3.0\n\n## Features\n- feat: a (abc1234)\n\n"


def test_render_all_sections():
    notes = ReleaseNotes(
        version="2.0.0", features=["- feat: a"], fixes=["- fix: b"], other=["- chore: c"]
    )
    assert notes.render() == (
        "# 2.0.0\n\n"
        "## Features\n- feat: a\n\n"
        "## Bug Fixes\n- fix: b\n\n"
        "## Other Changes\n- chore: c\n\n"
    )


def test_generate_uses_commits_since_previous_tag(fake_vcs, tmp_path):
    fake_vcs.add_tag("1.0.0")
    feature = fake_vcs.add_commit("feat: search")
    fix = fake_vcs.add_commit("fix: crash")
    generator = ReleaseNotesGenerator(fake_vcs, tmp_path / "CHANGELOG.md")

    notes = generator.generate("1.1.0")

    assert notes.features == [f"- feat: search ({feature.short_sha})"]
    assert notes.fixes == [f"- fix: crash ({fix.short_sha})"]
    assert notes.other == []


def test_generate_for_tagged_version_excludes_later_commits(fake_vcs, tmp_path):
    fake_vcs.add_tag("1.0.0")
    fake_vcs.add_commit("feat: search")
    fake_vcs.add_tag("1.1.0")
    fake_vcs.add_commit("fix: after release")
    generator = ReleaseNotesGenerator(fake_vcs, tmp_path / "CHANGELOG.md")

    notes = generator.generate("1.1.0")

    assert [line.split(" (")[0] for line in notes.features] == ["- feat: search"]
    assert notes.fixes == []


def test_generate_is_reproducible(fake_vcs, tmp_path):
    fake_vcs.add_commit("feat: one")
    generator = ReleaseNotesGenerator(fake_vcs, tmp_path / "CHANGELOG.md")
    assert generator.generate("1.0.0").render() == generator.generate("1.0.0").render()


def test_generate_soft_fails(fake_vcs, tmp_path):
    fake_vcs.fail_reads = True
    notes = ReleaseNotesGenerator(fake_vcs, tmp_path / "CHANGELOG.md").generate("1.0.0")
    assert notes.is_empty()
    assert notes.render() == "# 1.0.0\n\n"


def test_persist_creates_changelog(fake_vcs, tmp_path):
    path = tmp_path / "docs" / "CHANGELOG.md"
    generator = ReleaseNotesGenerator(fake_vcs, path)
    notes = ReleaseNotes(version="1.0.0", fixes=["- fix: a"])

    assert generator.persist(notes) == path
    assert path.read_text() == notes.render()


def test_persist_prepends_to_existing(fake_vcs, tmp_path):
    path = tmp_path / "CHANGELOG.md"
    path.write_text("# 0.9.0\n")
    generator = ReleaseNotesGenerator(fake_vcs, path)
    notes = ReleaseNotes(version="1.0.0", other=["- chore: a"])

    generator.persist(notes)

    assert path.read_text() == notes.render() + "\n\n# 0.9.0\n"


@pytest.mark.parametrize("version", ["1.0.0", "2.0.0-rc.1"])
def test_notes_header_is_version(fake_vcs, tmp_path, version):
    notes = ReleaseNotesGenerator(fake_vcs, tmp_path / "C.md").generate(version)
    assert notes.render().startswith(f"# {version}\n\n")
