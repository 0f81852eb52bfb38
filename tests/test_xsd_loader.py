import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from rio_schema_flattener.errors import MissingNameError, SchemaShapeError
from rio_schema_flattener.xsd_loader import build_index, load_schema, local_name

FIXTURE = Path(__file__).resolve().parent / "fixtures" / "schema" / "sample_rio.xsd"

XS = 'xmlns:xs="http://www.w3.org/2001/XMLSchema"'


def _index(body: str):
    return build_index(ET.fromstring(f"<xs:schema {XS}>{body}</xs:schema>"))


def test_indexes_complex_types_and_elements():
    index = load_schema(FIXTURE)

    assert index.source == FIXTURE
    assert "Onderwijsaanbod" in index.complex_types
    assert "Kenmerkwaardenbereik_AangebodenHOOpleiding" in index.complex_types
    assert index.complex_types["Periode"].get("name") == "Periode"
    # inline-typed elements have no type to point a ref at
    assert index.element_types == {
        "vastInstroommoment": "VastInstroommoment",
        "opvragen_HoOpleiding": "opvragen_HoOpleiding_request",
    }


def test_complex_types_keep_document_order():
    index = load_schema(FIXTURE)
    names = list(index.complex_types)
    assert names[0] == "Kenmerk"
    assert names[-1] == "opvragen_HoOpleiding_request"


def test_strips_namespaces_from_tags():
    index = load_schema(FIXTURE)
    for node in index.complex_types.values():
        for child in node.iter():
            assert not child.tag.startswith("{")
    assert index.complex_types["Periode"][0].tag == "sequence"


def test_keeps_prefixed_attribute_values():
    index = load_schema(FIXTURE)
    sequence = index.complex_types["Cohort"][0]
    assert sequence[0].get("type") == "xs:string"


def test_strips_namespaced_attribute_keys():
    index = _index(
        '<xs:complexType name="Foo" xml:lang="nl">'
        "<xs:sequence/>"
        "</xs:complexType>"
    )
    assert index.complex_types["Foo"].get("lang") == "nl"


def test_removes_annotations_everywhere():
    index = load_schema(FIXTURE)

    onderwijsaanbod = index.complex_types["Onderwijsaanbod"]
    assert [child.tag for child in onderwijsaanbod] == ["sequence"]

    begindatum = index.complex_types["Periode"][0][0]
    assert begindatum.get("name") == "begindatum"
    assert len(begindatum) == 0

    for node in index.complex_types.values():
        assert not any(child.tag == "annotation" for child in node.iter())


def test_complex_type_without_name_fails():
    with pytest.raises(MissingNameError) as excinfo:
        _index("<xs:complexType><xs:sequence/></xs:complexType>")
    assert "<complexType>" in str(excinfo.value)


def test_non_schema_document_fails():
    with pytest.raises(SchemaShapeError):
        build_index(ET.fromstring("<definitions/>"))


def test_malformed_xml_raises_parse_error(tmp_path):
    path = tmp_path / "broken.xsd"
    path.write_text("<xs:schema")
    with pytest.raises(ET.ParseError):
        load_schema(path)


@pytest.mark.parametrize(
    "value, expected",
    [("xs:string", "string"), ("Datum", "Datum"), (None, None)],
)
def test_local_name(value, expected):
    assert local_name(value) == expected
