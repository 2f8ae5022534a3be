from dfa_animator.layout import layout_frame
from dfa_animator.svg import automaton_to_svg, frame_to_svg, write_svg


def test_frame_contains_every_primitive(example):
    svg = frame_to_svg(layout_frame(example, "q0"))
    assert svg.count("<circle") == 6 + 1
    assert svg.count("<path") == 3
    # nine straight edges plus two barbs for each of the twelve edges
    assert svg.count("<line") == 9 + 24
    assert 'stroke="#ff0000" stroke-width="4"' in svg
    assert 'cx="100" cy="100" r="40" fill="#00ff00"' in svg
    assert ">q5</text>" in svg


def test_loop_path_uses_quadratic_curve(example):
    svg = automaton_to_svg(example)
    assert 'd="M 130,75 Q 100,-50 70,75"' in svg


def test_labels_are_escaped():
    from dfa_animator.automata import Automaton

    automaton = Automaton(["<a>"], ["&"], [("<a>", "<a>", "&")], "<a>", [])
    svg = automaton_to_svg(automaton)
    assert "&lt;a&gt;" in svg
    assert ">&amp;</text>" in svg


def test_write_svg(tmp_path, example):
    path = tmp_path / "out.svg"
    assert write_svg(example, str(path), current="q3", width=800, height=500) == str(path)
    content = path.read_text(encoding="utf-8")
    assert 'width="800" height="500"' in content
    assert content.endswith("</svg>\n")
