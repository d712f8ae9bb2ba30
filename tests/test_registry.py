from __future__ import annotations

from markdown import Extension, Markdown

from markdeck import DeckRenderer, EmojiOptions, RenderOptions, RenderSession
from markdeck.renderer.registry import HIGHEST_PRIORITY, LOWEST_PRIORITY, TransformRegistry


def _order(md: Markdown, *names: str) -> list[int]:
    return [md.treeprocessors.get_index_for_name(name) for name in names]


def test_transforms_run_in_declared_order() -> None:
    md = DeckRenderer().markdown
    indexes = _order(md, "inline", "markdeck_emoji", "markdeck_math", "markdeck_fitting", "markdeck_slides")
    assert indexes == sorted(indexes)


def test_register_reports_enabled_transforms() -> None:
    renderer = DeckRenderer(RenderOptions(math=None, emoji=EmojiOptions(False, False)))
    md = renderer.compiler.create_markdown()
    assert renderer.registry.register(md, RenderSession()) == ["fitting"]
    assert "markdeck_math" not in md.treeprocessors
    assert "markdeck_emoji" not in md.treeprocessors


def test_skipping_keeps_priorities_of_the_rest() -> None:
    full = DeckRenderer().registry
    partial = DeckRenderer(RenderOptions(math=None)).registry
    assert [partial.priority_for(position) for position in range(3)] == [
        full.priority_for(position) for position in range(3)
    ]

    md = DeckRenderer(RenderOptions(math=None)).markdown
    indexes = _order(md, "inline", "markdeck_emoji", "markdeck_fitting", "markdeck_slides")
    assert indexes == sorted(indexes)
    assert "markdeck_math" not in md.treeprocessors


def test_base_hook_runs_first() -> None:
    calls: list[str] = []

    class Noop(Extension):
        def extendMarkdown(self, md):
            pass

    class Recorder:
        name = "recorder"
        enabled = True

        def extension(self, session, priority):
            calls.append("transform")
            return Noop()

    registry = TransformRegistry(lambda md: calls.append("base"), [Recorder(), Recorder()])
    registry.register(Markdown(), RenderSession())
    assert calls == ["base", "transform", "transform"]


def test_priorities_stay_between_prettify_and_slides() -> None:
    registry = TransformRegistry(lambda md: None, [object()] * 5)
    priorities = [registry.priority_for(position) for position in range(5)]
    assert priorities == sorted(priorities, reverse=True)
    assert priorities[0] == HIGHEST_PRIORITY
    assert all(LOWEST_PRIORITY < value <= HIGHEST_PRIORITY for value in priorities)


def test_sessions_are_isolated_per_markdown_instance() -> None:
    renderer = DeckRenderer()
    first, second = RenderSession(), RenderSession()
    renderer.build_markdown(first).convert("$x$")
    renderer.build_markdown(second).convert("no math")
    assert first.math_rendered is True
    assert second.math_rendered is False
