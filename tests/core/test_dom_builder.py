# tests/core/test_dom_builder.py
import pytest

from formfixer.controllers.form_controller import FormController
from formfixer.dom.builder import DOMBuilder
from formfixer.dom.core import ElementDefinition, ElementBase
from formfixer.dom.registry import DOMRegistry


@pytest.fixture
def builder():
    """Een fixture die een DOMBuilder met de standaard html.parser levert."""
    return DOMBuilder(features="html.parser")


def test_parse_fragment_without_html_wrapper(builder):
    """Een los formulier-fragment wordt zonder <html>/<body> geparsed."""
    doc = builder.parse_doc('<form><input name="a"><textarea id="b"></textarea><select></select></form>')

    assert len(doc.forms) == 1
    controls = doc.forms[0].controls
    assert [c.tag for c in controls] == ["input", "textarea", "select"]
    assert [c.position for c in controls] == [0, 1, 2]
    assert [c.name for c in controls] == ["a", "b", "field-2"]
    assert not doc.degraded


def test_name_prefers_name_over_id(builder):
    doc = builder.parse_doc('<form><input name="user" id="user-id"></form>')
    control = doc.forms[0].controls[0]
    assert control.name == "user"
    assert control.id == "user-id"


def test_synthesized_index_resets_per_form(builder):
    """De index van 'field-<n>' begint voor elk formulier opnieuw bij 0."""
    html = (
        '<form><input type="text"><input type="text"></form>'
        '<form><input type="text"></form>'
    )
    doc = builder.parse_doc(html)

    assert [c.name for c in doc.forms[0].controls] == ["field-0", "field-1"]
    assert [c.name for c in doc.forms[1].controls] == ["field-0"]


def test_label_lookup_is_document_wide(builder):
    """Een label buiten het formulier telt ook mee."""
    html = '<label for="email">E-mail</label><form><input id="email"><input id="phone"></form>'
    doc = builder.parse_doc(html)

    email, phone = doc.forms[0].controls
    assert doc.label_targets == {"email"}
    assert email.has_label is True
    assert phone.has_label is False


def test_empty_id_is_treated_as_absent(builder):
    doc = builder.parse_doc('<label for="">x</label><form><input id=""></form>')
    control = doc.forms[0].controls[0]
    assert control.id is None
    assert control.has_label is False
    assert control.name == "field-0"


def test_controls_outside_forms_are_listed_but_not_in_a_form(builder):
    doc = builder.parse_doc('<input name="loose"><form><input name="inside"></form>')

    assert [c.name for c in doc.forms[0].controls] == ["inside"]
    assert [c.field_key for c in doc.controls] == ["loose", "inside"]
    assert doc.controls[0].position is None


def test_input_type_defaults_to_tag_name(builder):
    doc = builder.parse_doc('<input name="a"><textarea name="b"></textarea><select name="c"></select>'
                            '<input name="d" type="Number">')
    assert [c.input_type for c in doc.controls] == ["input", "textarea", "select", "number"]


def test_required_is_presence_only(builder):
    """Het 'required' attribuut is een boolean-presence attribuut: de waarde doet er niet toe."""
    doc = builder.parse_doc('<input name="a" required><input name="b" required="false"><input name="c">')
    assert [c.is_required for c in doc.controls] == [True, True, False]


def test_empty_html_returns_empty_document(builder):
    doc = builder.parse_doc("")
    assert doc.forms == []
    assert doc.controls == []
    assert doc.to_html() == ""


def test_parser_failure_degrades_to_empty_control_set(builder, monkeypatch):
    """Als de parser faalt, levert de builder een leeg document met een doc_error op."""
    def exploding_parser(*args, **kwargs):
        raise AssertionError("unexpected end of markup")

    monkeypatch.setattr("formfixer.dom.builder.BeautifulSoup", exploding_parser)

    html = "<form><input name='x'></form>"
    doc = builder.parse_doc(html)
    assert doc.degraded
    assert doc.forms == []
    assert doc.controls == []
    assert "AssertionError" in doc.doc_errors[0]
    assert doc.to_html() == html

    # The analyzer hands the markup back unchanged, without findings
    result = FormController().analyze(html)
    assert result.findings == []
    assert result.repaired_html == html


def test_malformed_markup_is_tolerated(builder):
    doc = builder.parse_doc('<form><input name="a"<div><select name="b"></form></div>')
    assert not doc.degraded
    assert len(doc.forms) == 1


def test_bom_is_stripped(builder):
    doc = builder.parse_doc('\ufeff<form><input name="a"></form>')
    assert doc.to_html().startswith("<form>")


def test_registry_exposes_all_codes():
    DOMRegistry.discover()
    codes = DOMRegistry.get_all_possible_codes()
    assert "MISSING_REQUIRED" in codes
    assert "MISSING_LABEL" in codes
    assert DOMRegistry.get_repair("MISSING_REQUIRED") is not None
    assert DOMRegistry.get_repair("MISSING_LABEL") is None


def test_definition_rejects_repairs_for_undeclared_codes():
    with pytest.raises(ValueError):
        ElementDefinition(
            tag_names=["x-widget"],
            model=ElementBase,
            parser=lambda tag: ElementBase(tag=tag.name),
            repairs={"NOT_A_CODE": lambda node: None},
        )
