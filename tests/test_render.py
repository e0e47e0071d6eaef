from mdpress.render import PageFields, copy_static, render_markdown, render_template


def test_unknown_fence_language_is_escaped_and_unstyled():
    html = render_markdown("```notalanguage\nif x < y: print('&')\n```\n")
    assert "if x &lt; y: print(" in html
    assert "&amp;" in html
    assert '<span class="k">' not in html


def test_known_fence_language_is_highlighted():
    html = render_markdown("```python\ndef f():\n    return 1\n```\n")
    assert 'class="codehilite"' in html
    assert '<span class="k">def</span>' in html


def test_fence_without_language_renders_code():
    html = render_markdown("```\n<b>raw</b>\n```\n")
    assert "&lt;b&gt;raw&lt;/b&gt;" in html
    assert "<b>raw</b>" not in html


def test_footnotes():
    html = render_markdown("Claim.[^1]\n\n[^1]: Source.\n")
    assert 'class="footnote"' in html
    assert "Source." in html


def test_math_is_wrapped_for_client_rendering():
    html = render_markdown("Euler: $e^{i\\pi} = -1$\n\n$$\n\\int_0^1 x\\,dx\n$$\n")
    assert '<span class="arithmatex">\\(e^{i\\pi} = -1\\)</span>' in html
    assert '<div class="arithmatex">' in html


def test_render_markdown_is_deterministic():
    text = "# Title\n\nText[^n] and $x$.\n\n```python\nx = 1\n```\n\n[^n]: Note.\n"
    assert render_markdown(text) == render_markdown(text)


def test_render_template_replaces_every_occurrence():
    template = "<title>{{TITLE}}</title><meta content='{{TITLE}}'>{{CONTENT}}"
    out = render_template(template, {"TITLE": "Hi", "CONTENT": "<p>x</p>"})
    assert out == "<title>Hi</title><meta content='Hi'><p>x</p>"


def test_render_template_leaves_unknown_placeholders():
    assert render_template("{{TITLE}} {{UNKNOWN}}", {"TITLE": "a"}) == "a {{UNKNOWN}}"


def test_render_template_does_not_rescan_values():
    template = "{{CONTENT}}|{{TITLE}}"
    out = render_template(template, {"CONTENT": "literal {{TITLE}}", "TITLE": "T"})
    assert out == "literal {{TITLE}}|T"


def test_render_template_handles_overlapping_names():
    out = render_template("{{OG}} {{OG_IMAGE}}", {"OG": "a", "OG_IMAGE": "b"})
    assert out == "a b"


def test_render_template_accepts_page_fields():
    fields = PageFields(
        title="T",
        description="D",
        content="C",
        canonical_url="U",
        og_type="article",
        og_image="I",
        year="2025",
    )
    template = "{{TITLE}}{{DESCRIPTION}}{{CONTENT}}{{CANONICAL_URL}}{{OG_TYPE}}{{OG_IMAGE}}{{YEAR}}"
    assert render_template(template, fields) == "TDCUarticleI2025"


def test_copy_static_mirrors_tree(tmp_path):
    src = tmp_path / "public"
    (src / "img" / "icons").mkdir(parents=True)
    (src / "robots.txt").write_text("User-agent: *\n", encoding="utf-8")
    (src / "img" / "logo.png").write_bytes(b"\x89PNG\r\n\x00\xff")
    (src / "img" / "icons" / "a.svg").write_text("<svg/>", encoding="utf-8")
    out = tmp_path / "dist"
    (out / "img").mkdir(parents=True)
    (out / "img" / "existing.txt").write_text("keep", encoding="utf-8")

    copy_static(src, out)

    for path in src.rglob("*"):
        if path.is_file():
            assert (out / path.relative_to(src)).read_bytes() == path.read_bytes()
    assert (out / "img" / "existing.txt").read_text(encoding="utf-8") == "keep"
