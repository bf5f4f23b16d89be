# tests/remediator/test_fix_strategies.py
import pytest
from bs4 import BeautifulSoup

from auditor.dom.catalog import RULE_ORDER
from remediator.controllers.fix_controller import FixController
from remediator.core import FixRegistry
from remediator.model import FixOptions
from remediator.utils.text_utils import filename_stem, humanize, unique_id, url_host
from wcagpiper.core.api import analyze, fix

PAGE = '<!DOCTYPE html><html lang="en"><head><title>Home</title></head><body>{}</body></html>'


def analyze_and_fix(code, fmt="html"):
    return fix(code, analyze(code, format=fmt).violations, format=fmt)


def soup_of(markup):
    return BeautifulSoup(markup, "html.parser")


# --- Tekst-hulpfuncties ---

def test_humanize_and_filename_stem():
    assert humanize(filename_stem("/static/img/my-logo.png?v=2")) == "My Logo"
    assert humanize("first_name") == "First Name"
    assert filename_stem("") == ""


def test_url_host():
    assert url_host("https://www.example.com/about") == "example.com"
    assert url_host("/contact") == "/contact"


def test_unique_id():
    assert unique_id("email-input", []) == "email-input"
    assert unique_id("email-input", ["email-input", "email-input-2"]) == "email-input-3"


# --- Gedrag per regel ---

def test_image_alt_from_file_name():
    """<img src="my-logo.png"> krijgt alt="My Logo"."""
    output = analyze_and_fix('<img src="my-logo.png">')
    assert soup_of(output).find("img")["alt"] == "My Logo"


def test_image_alt_generic_fallback():
    output = analyze_and_fix("<img>")
    assert soup_of(output).find("img")["alt"] == "Image"


def test_input_label_from_name():
    """<input type="text" name="first_name"> krijgt aria-label="First Name"."""
    output = analyze_and_fix('<input type="text" name="first_name">')
    assert soup_of(output).find("input")["aria-label"] == "First Name"


def test_wrapped_label_gets_for_and_id():
    """Een label rond een control wordt er via for/id aan gekoppeld."""
    output = analyze_and_fix('<label>Email <input type="email" name="email"></label>')
    soup = soup_of(output)
    control = soup.find("input")
    assert control["id"] == "email-input"
    assert soup.find("label")["for"] == "email-input"
    assert not control.has_attr("aria-label")


def test_wrapped_label_ids_are_unique():
    code = '<span id="email-input"></span><label>Email <input type="email" name="email"></label>'
    soup = soup_of(analyze_and_fix(code))
    assert soup.find("input")["id"] == "email-input-2"
    assert soup.find("label")["for"] == "email-input-2"


def test_heading_level_is_lowered():
    """<h1>A</h1><h3>B</h3>: de h3 wordt een h2 en houdt zijn tekst."""
    soup = soup_of(analyze_and_fix('<h1>A</h1><h3 class="sub">B</h3>'))
    assert soup.find("h3") is None
    h2 = soup.find("h2")
    assert h2.get_text(strip=True) == "B"
    assert h2["class"] == ["sub"]


def test_heading_cascading_skips_are_all_fixed():
    code = PAGE.format("<h1>A</h1><h4>B</h4><h6>C</h6>")
    fixed = analyze_and_fix(code)
    assert [h.name for h in soup_of(fixed).find_all(["h1", "h2", "h3", "h4", "h5", "h6"])] == ["h1", "h2", "h3"]
    assert analyze(fixed).count("heading-order") == 0


def test_html_lang_is_added():
    output = analyze_and_fix("<!DOCTYPE html><html><head><title>T</title></head><body></body></html>")
    assert soup_of(output).html["lang"] == "en"


@pytest.mark.parametrize("button, label", [
    ('<button type="submit"></button>', "Submit"),
    ("<button></button>", "Click here"),
])
def test_button_names(button, label):
    assert soup_of(analyze_and_fix(button)).find("button")["aria-label"] == label


def test_link_names():
    soup = soup_of(analyze_and_fix(
        '<a href="https://www.example.com/about"></a><a href="#"></a><a href="/x" title="Docs"></a>'
    ))
    first, second, third = soup.find_all("a")
    assert first["aria-label"] == "Link to example.com"
    assert second.get_text(strip=True) == "Link"
    assert third["aria-label"] == "Docs"


def test_aria_label_strategy():
    code = '<div role="button"></div><a href="/x"></a><span role="link" title="Home"></span>'
    soup = soup_of(fix(code, [{"id": "aria-label"}]))
    assert soup.find("div")["aria-label"] == "Interactive element"
    assert soup.find("a")["aria-label"] == "Link to /x"
    assert soup.find("span")["aria-label"] == "Home"


def test_color_contrast_is_injected_once():
    violations = [{"id": "color-contrast"}, {"id": "color-contrast"}]
    once = fix("<p>x</p>", violations)
    twice = fix(once, violations)
    styles = soup_of(twice).find_all("style", attrs={"data-wcagpiper-contrast": True})
    assert len(styles) == 1
    assert styles[0].parent.name == "head"


def test_color_contrast_creates_head():
    output = fix("<html><body><p>x</p></body></html>", [{"id": "color-contrast"}])
    soup = soup_of(output)
    assert soup.head is not None
    assert soup.head.find("style") is not None


def test_orphan_list_items_are_wrapped():
    """Aaneengesloten losse <li>-elementen komen samen in één <ul>."""
    soup = soup_of(fix("<div><li>A</li><li>B</li></div><li>C</li>", [{"id": "list"}]))
    lists = soup.find_all("ul")
    assert len(lists) == 2
    assert [li.get_text(strip=True) for li in lists[0].find_all("li")] == ["A", "B"]
    assert [li.get_text(strip=True) for li in lists[1].find_all("li")] == ["C"]


def test_required_fields():
    code = '<input type="email" required aria-label="Email"><select required></select>'
    soup = soup_of(fix(code, [{"id": "required-field"}]))
    email, country = soup.find("input"), soup.find("select")
    assert email["aria-label"] == "Email (required)"
    assert email["aria-required"] == "true"
    assert country["aria-required"] == "true"


# --- Algemene eigenschappen ---

MONOTONIC_SAMPLES = {
    "image-alt": '<img src="a.png"><img src="b.png">',
    "label": '<input type="text"><label>X <select></select></label>',
    "heading-order": "<h1>A</h1><h4>B</h4><h6>C</h6><h2>D</h2><h5>E</h5>",
    "html-has-lang": "<p>x</p>",
    "document-title": "<p>x</p>",
    "button-name": '<button></button><button type="submit"></button>',
    "link-name": '<a href="/x"></a><a href="#"></a>',
}


@pytest.mark.parametrize("rule_id", RULE_ORDER)
def test_fix_never_increases_violations(rule_id):
    """Na een fix zijn er nooit meer overtredingen dan ervoor; met een strategie geen enkele."""
    code = MONOTONIC_SAMPLES[rule_id]
    before = analyze(code).count(rule_id)
    after = analyze(analyze_and_fix(code)).count(rule_id)
    assert after <= before
    if FixRegistry.get(rule_id) is not None:
        assert after == 0


def test_unknown_rule_is_skipped():
    """Een onbekende regel-id geeft geen fout en verandert niets."""
    code = '<img src="a.png">'
    unknown = [{"id": "made-up-rule", "impact": "minor", "nodes": [{"html": "<img>"}]}]
    assert fix(code, unknown) == fix(code, [])


def test_malformed_violations_are_ignored():
    code = '<img src="a.png">'
    assert fix(code, ["image-alt", 42, None]) == fix(code, [])


def test_auto_fix_disabled_only_formats():
    code = '<img src="my-logo.png">'
    output = fix(code, analyze(code).violations, auto_fix=False)
    assert not soup_of(output).find("img").has_attr("alt")


def test_only_targeted_elements_are_changed():
    code = '<img src="a.png"><img src="b.png">'
    first = analyze(code).violations[0]
    soup = soup_of(fix(code, [first]))
    a, b = soup.find_all("img")
    assert a["alt"] == "A"
    assert not b.has_attr("alt")


def test_stale_targets_fall_back_to_document_search():
    violations = analyze('<p>x</p><img src="a.png">').violations
    soup = soup_of(fix('<img src="b-c.png">', violations))
    assert soup.find("img")["alt"] == "B C"


def test_failing_strategy_keeps_other_fixes(monkeypatch):
    """Als een strategie faalt, worden de andere fixes nog steeds toegepast."""
    controller = FixController()

    def boom(soup, targets):
        raise RuntimeError("broken strategy")

    boom.document_wide = False
    monkeypatch.setitem(FixRegistry._strategies, "image-alt", boom)

    code = '<img src="a.png">'
    output = controller.fix(code, analyze(code).violations, FixOptions())
    soup = soup_of(output)
    assert soup.html["lang"] == "en"
    assert not soup.find("img").has_attr("alt")


def test_unparseable_source_is_returned_unchanged(monkeypatch):
    controller = FixController()

    def explode(*args, **kwargs):
        raise RuntimeError("no tree")

    monkeypatch.setattr(controller.builder, "parse_doc", explode)
    assert controller.fix("<img>", [{"id": "image-alt"}]) == "<img>"


def test_fix_options_accept_camel_case():
    assert FixOptions.model_validate({"autoFix": False}).auto_fix is False
    assert FixOptions(auto_fix=False).auto_fix is False


# --- Dialecten ---

def test_react_fix_roundtrip():
    code = '<div className="card"><img src="my-logo.png" className="logo" /><label>Email <input type="email" name="email" /></label></div>'
    output = analyze_and_fix(code, fmt="react")
    assert 'className="card"' in output
    assert 'className="logo"' in output
    assert 'alt="My Logo"' in output
    assert 'htmlFor="email-input"' in output
    assert "<html" not in output
    assert " class=" not in output


def test_react_expression_names_are_not_copied():
    """Een expressie als naam wordt niet in een label overgenomen."""
    output = analyze_and_fix("<input name={field} />", fmt="react")
    assert "name={field}" in output
    assert 'aria-label="Text"' in output


def test_angular_bindings_survive_fix():
    code = '<img [src]="logoUrl"><button (click)="save()" *ngIf="ready"></button>'
    output = analyze_and_fix(code, fmt="angular")
    assert '[src]="logoUrl"' in output
    assert '(click)="save()"' in output
    assert '*ngIf="ready"' in output
    assert 'alt="Image"' in output
    assert 'aria-label="Click here"' in output


def test_vue_bindings_survive_fix():
    code = (
        '<template>\n  <div>\n    <img :src="logo">\n    <input v-model="name" name="user_name">\n  </div>\n</template>\n'
        "<script>\nexport default {}\n</script>\n"
    )
    output = analyze_and_fix(code, fmt="vue")
    assert output.startswith("<template>")
    assert ':src="logo"' in output
    assert 'v-model="name"' in output
    assert 'alt="Image"' in output
    assert 'aria-label="User Name"' in output
    assert "export default {}" in output


def test_native_tag_next_to_component_is_left_alone():
    """Een <Button>-component maakt van de native <button> ernaast geen component."""
    code = '<div><Button onClick={go}>Go</Button><button type="submit">Send</button></div>'
    output = fix(code, [], format="react")
    assert "<Button onClick={go}>" in output
    assert '<button type="submit">' in output
    assert output.count("</Button>") == 1


def test_fix_inside_component_keeps_component_spelling():
    code = '<Card title="x"><img src="my-logo.png" /></Card><card-list></card-list>'
    output = analyze_and_fix(code, fmt="react")
    assert '<Card title="x">' in output
    assert "</Card>" in output
    assert "<card-list>" in output
    assert 'alt="My Logo"' in output


# --- Formatter ---

@pytest.mark.parametrize("code, fmt", [
    ('<img src="my-logo.png">', "html"),
    ('<div className="x"><img src="my-logo.png" /></div>', "react"),
])
def test_formatter_failure_returns_unformatted_fix(monkeypatch, code, fmt):
    """Als het formatteren faalt, komt de gerepareerde markup ongeformatteerd terug."""
    from bs4 import Tag

    violations = analyze(code, format=fmt).violations

    def broken_prettify(self, *args, **kwargs):
        raise RuntimeError("formatter crashed")

    monkeypatch.setattr(Tag, "prettify", broken_prettify)
    output = fix(code, violations, format=fmt)
    assert 'alt="My Logo"' in output
    assert output != code
    assert "__expr_" not in output
    assert "data-wcagpiper" not in output
    if fmt == "react":
        assert 'className="x"' in output
        assert "<html" not in output
