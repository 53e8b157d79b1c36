import pytest
from pydantic import ValidationError

from novel_architect.models import Chapter, Part, Section, SectionRef, Story, StoryStatus


def _story() -> Story:
    chapters = tuple(
        Chapter(
            id=f"ch-{c}",
            number=c + 1,
            title=f"T{c}",
            summary="",
            parts=tuple(
                Part(
                    id=f"ch-{c}-p-{p}",
                    number=p + 1,
                    summary="",
                    sections=tuple(
                        Section(id=f"ch-{c}-p-{p}-s-{s}", number=s + 1, summary=f"brief {c}{p}{s}")
                        for s in range(2)
                    ),
                )
                for p in range(2)
            ),
        )
        for c in range(2)
    )
    return Story(chapters=chapters)


def test_status_only_moves_forward():
    assert StoryStatus.INPUT.advance(StoryStatus.ANALYZING) == StoryStatus.ANALYZING
    assert StoryStatus.STRUCTURING.advance(StoryStatus.WRITING) == StoryStatus.WRITING
    assert StoryStatus.WRITING.advance(StoryStatus.STRUCTURING) == StoryStatus.WRITING
    assert StoryStatus.WRITING.advance(StoryStatus.WRITING) == StoryStatus.WRITING


def test_new_story_defaults():
    story = Story()
    assert story.status == StoryStatus.INPUT
    assert story.bible is None
    assert story.chapters == ()
    assert len(story.id) == 32
    assert Story().id != story.id


def test_models_are_frozen():
    section = Section(id="s", number=1, summary="brief")
    with pytest.raises(ValidationError):
        section.content = "changed"


def test_section_defaults():
    section = Section(id="s", number=1, summary="brief")
    assert section.content == ""
    assert section.short_summary == ""
    assert section.is_written is False


def test_iter_sections_reading_order():
    story = _story()
    ids = [s.id for _, _, s in story.iter_sections()]
    assert ids[:3] == ["ch-0-p-0-s-0", "ch-0-p-0-s-1", "ch-0-p-1-s-0"]
    assert ids[-1] == "ch-1-p-1-s-1"
    assert len(ids) == 8


def test_find_section():
    story = _story()
    chapter, part, section = story.find(SectionRef("ch-1", "ch-1-p-0", "ch-1-p-0-s-1"))
    assert chapter.id == "ch-1"
    assert part.id == "ch-1-p-0"
    assert section.summary == "brief 101"


def test_find_rejects_mismatched_triple():
    story = _story()
    # Section exists, but not under this part
    assert story.find(SectionRef("ch-0", "ch-0-p-1", "ch-0-p-0-s-0")) is None


def test_previous_section_crosses_boundaries():
    story = _story()
    assert story.previous_section(SectionRef("ch-0", "ch-0-p-0", "ch-0-p-0-s-0")) is None
    assert story.previous_section(SectionRef("ch-0", "ch-0-p-1", "ch-0-p-1-s-0")).id == "ch-0-p-0-s-1"
    assert story.previous_section(SectionRef("ch-1", "ch-1-p-0", "ch-1-p-0-s-0")).id == "ch-0-p-1-s-1"


def test_progress_counts_written_sections():
    story = _story()
    assert story.progress == (0, 8)


def test_section_ref_of():
    story = _story()
    chapter, part, section = next(story.iter_sections())
    ref = SectionRef.of(chapter, part, section)
    assert ref == ("ch-0", "ch-0-p-0", "ch-0-p-0-s-0")
    assert str(ref) == "ch-0-p-0-s-0"
