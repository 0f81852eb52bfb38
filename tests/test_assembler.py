"""End-to-end tests for assembling the entity mapping from the sample schema."""

import logging
from pathlib import Path

import pytest

from rio_schema_flattener.assembler import (
    DEFAULT_SCHEMA_PATH,
    EntityGroup,
    FlattenerConfig,
    assemble,
    flatten_schema,
)
from rio_schema_flattener.errors import SchemaShapeError
from rio_schema_flattener.models import (
    Cardinality,
    Choice,
    Field,
    KenmerkPlaceholder,
    Literal,
    Reference,
)
from rio_schema_flattener.reducer import ResolutionContext
from rio_schema_flattener.xsd_loader import load_schema

FIXTURE = Path(__file__).resolve().parent / "fixtures" / "schema" / "sample_rio.xsd"

BEGINDATUM = Field("begindatum", False, Cardinality.REQUIRED, "Datum")
EINDDATUM = Field("einddatum", False, Cardinality.OPTIONAL, "Datum")


def _walk(attributes):
    for descriptor in attributes:
        yield descriptor
        if isinstance(descriptor, Choice):
            yield from _walk(descriptor.options)


def test_default_entities_in_order():
    mapping = flatten_schema(FIXTURE)
    assert list(mapping) == [
        "AangebodenHOOpleiding",
        "AangebodenHOOpleidingPeriode",
        "AangebodenHOOpleidingCohort",
        "AangebodenHOOpleidingsonderdeel",
        "AangebodenHOOpleidingsonderdeelPeriode",
        "AangebodenHOOpleidingsonderdeelCohort",
        "AangebodenParticuliereOpleiding",
        "AangebodenParticuliereOpleidingPeriode",
        "AangebodenParticuliereOpleidingCohort",
        "HoOpleiding",
        "HoOpleidingPeriode",
        "HoOnderwijseenhedencluster",
        "HoOnderwijseenhedenclusterPeriode",
        "HoOnderwijseenheid",
        "HoOnderwijseenheidPeriode",
        "ParticuliereOpleiding",
        "ParticuliereOpleidingPeriode",
    ]


def test_aangeboden_opleiding_is_flattened():
    mapping = flatten_schema(FIXTURE)
    assert mapping["AangebodenHOOpleiding"] == [
        BEGINDATUM,
        EINDDATUM,
        Reference(Cardinality.ZERO_OR_MORE, "VastInstroommoment", "vastInstroommoment"),
        Field("deelnemersplaatsen", True, Cardinality.OPTIONAL, "xs:integer"),
        Field("website", True, Cardinality.OPTIONAL, "xs:anyURI"),
        Choice(
            (
                Field("opleidingseenheidSleutel", False, Cardinality.REQUIRED, "Sleutel"),
                Field("eigenOpleidingseenheidSleutel", False, Cardinality.REQUIRED, "xs:string"),
            )
        ),
        Field("toestemmingDeelnemersregistratie", False, Cardinality.OPTIONAL, "xs:string"),
    ]


def test_periode_gets_its_own_characteristics():
    mapping = flatten_schema(FIXTURE)
    assert mapping["AangebodenHOOpleidingPeriode"] == [
        BEGINDATUM,
        EINDDATUM,
        Field("naamLang", False, Cardinality.REQUIRED, "xs:string"),
        Field("eisenWerkzaamheden", True, Cardinality.OPTIONAL, "xs:string"),
    ]


def test_cohort_inherits_everything_from_base():
    mapping = flatten_schema(FIXTURE)
    assert mapping["AangebodenHOOpleidingCohort"] == [
        Field("cohortcode", False, Cardinality.REQUIRED, "xs:string"),
        Field("beginAanmeldperiode", False, Cardinality.OPTIONAL, "Datum"),
        Field("toelichting", False, (2, 5), "xs:string"),
    ]


def test_ho_opleiding_variants():
    mapping = flatten_schema(FIXTURE)

    ho_opleiding = mapping["HoOpleiding"]
    assert ho_opleiding[0] == Field("eigenOpleidingseenheidSleutel", False, None, "xs:string")
    assert isinstance(ho_opleiding[1], Literal)

    assert mapping["HoOpleidingPeriode"] == [
        BEGINDATUM,
        EINDDATUM,
        Field("naamKort", False, Cardinality.OPTIONAL, "xs:string"),
    ]


def test_missing_variants_map_to_empty_lists():
    mapping = flatten_schema(FIXTURE)
    assert mapping["AangebodenHOOpleidingsonderdeel"] == []
    assert mapping["ParticuliereOpleidingPeriode"] == []


def test_no_placeholders_or_removed_fields_in_output():
    mapping = flatten_schema(FIXTURE)
    for attributes in mapping.values():
        for descriptor in _walk(attributes):
            assert not isinstance(descriptor, KenmerkPlaceholder)
            if isinstance(descriptor, Field):
                assert descriptor.name is not None


def test_lazy_resolution_gives_same_mapping():
    eager = flatten_schema(FIXTURE)
    lazy = flatten_schema(FIXTURE, config=FlattenerConfig(resolve_all=False))
    assert lazy == eager


def test_assemble_with_explicit_names():
    ctx = ResolutionContext(load_schema(FIXTURE))
    mapping = assemble(ctx, ["HoOpleidingPeriode", "Onbekend"])
    assert list(mapping) == ["HoOpleidingPeriode", "Onbekend"]
    assert mapping["Onbekend"] == []
    # only what the requested entity needs is reduced
    assert len(ctx.cache) == 2


BROKEN_EXTRA_TYPE = """
  <xs:complexType name="Kapot">
    <xs:simpleContent><xs:extension base="xs:string"/></xs:simpleContent>
  </xs:complexType>
</xs:schema>
"""


@pytest.fixture
def broken_schema(tmp_path):
    """Sample schema plus one unreachable type with an unsupported shape."""
    text = FIXTURE.read_text().replace("</xs:schema>", BROKEN_EXTRA_TYPE)
    path = tmp_path / "broken.xsd"
    path.write_text(text)
    return path


def test_shape_violation_anywhere_aborts_run(broken_schema):
    with pytest.raises(SchemaShapeError):
        flatten_schema(broken_schema)


def test_lazy_run_ignores_unreachable_types(broken_schema):
    mapping = flatten_schema(broken_schema, config=FlattenerConfig(resolve_all=False))
    assert mapping["HoOpleidingPeriode"][-1].name == "naamKort"


def test_entity_group_names():
    group = EntityGroup(bases=("A", "B"), suffixes=("", "Periode"))
    assert list(group.names()) == ["A", "APeriode", "B", "BPeriode"]


def test_config_defaults():
    config = FlattenerConfig()
    assert config.schema_path == DEFAULT_SCHEMA_PATH
    assert config.resolve_all is True
    assert config.output_format == "json"
    assert len(list(config.entity_names())) == 17


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("RIO_XSD_PATH", str(FIXTURE))
    monkeypatch.setenv("RIO_OUTPUT_FORMAT", "EDN")
    monkeypatch.setenv("RIO_RESOLVE_ALL", "false")

    config = FlattenerConfig.from_env()

    assert config.schema_path == FIXTURE
    assert config.output_format == "edn"
    assert config.resolve_all is False


def test_config_rejects_unknown_format():
    with pytest.raises(ValueError):
        FlattenerConfig(output_format="yaml")


def test_cache_statistics_are_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="rio_schema_flattener.assembler"):
        flatten_schema(FIXTURE)
    stats_lines = [r.getMessage() for r in caplog.records if r.getMessage().startswith("Type cache:")]
    assert len(stats_lines) == 1
    assert "'reductions'" in stats_lines[0]
    assert "'hits'" in stats_lines[0]


def test_kenmerk_element_inside_choice_is_expanded(tmp_path):
    path = tmp_path / "choice.xsd"
    path.write_text(
        '<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">'
        '<xs:complexType name="Kenmerkwaardenbereik_HoOpleiding"><xs:sequence>'
        '<xs:element name="website" type="xs:anyURI" minOccurs="0" maxOccurs="1"/>'
        "</xs:sequence></xs:complexType>"
        '<xs:complexType name="Basis"><xs:sequence/></xs:complexType>'
        '<xs:complexType name="HoOpleiding"><xs:complexContent><xs:extension base="Basis">'
        "<xs:sequence><xs:choice>"
        '<xs:element name="code" type="xs:string" minOccurs="1" maxOccurs="1"/>'
        '<xs:element name="kenmerken" type="Kenmerk" minOccurs="0" maxOccurs="999"/>'
        "</xs:choice></xs:sequence>"
        "</xs:extension></xs:complexContent></xs:complexType>"
        "</xs:schema>"
    )
    mapping = flatten_schema(path)
    assert mapping["HoOpleiding"] == [
        Choice(
            (
                Field("code", False, Cardinality.REQUIRED, "xs:string"),
                Field("website", True, Cardinality.OPTIONAL, "xs:anyURI"),
            )
        )
    ]
    for attributes in mapping.values():
        for descriptor in _walk(attributes):
            assert not isinstance(descriptor, KenmerkPlaceholder)
