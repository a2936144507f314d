from __future__ import annotations

import pytest

from services.driver_parser import (
    FIELD_LABELS,
    PUBLISHED_NAME,
    DriverRecord,
    MalformedBoundaryError,
    labels_for,
    parse_enum_drivers,
)

ENGLISH_OUTPUT = "\r\n".join(
    [
        "Microsoft PnP Utility",
        "",
        "Published Name:     oem0.inf",
        "Original Name:      prnms001.inf",
        "Provider Name:      Microsoft",
        "Class Name:         Printers",
        "Class GUID:         {4d36e979-e325-11ce-bfc1-08002be10318}",
        "Driver Version:     06/21/2006 10.0.19041.1",
        "Signer Name:        Microsoft Windows",
        "",
        "Published Name:     oem1.inf",
        "Original Name:      nvlddmkm.inf",
        "Provider Name:      NVIDIA",
        "Class Name:         Display adapters",
        "Driver Version:     09/12/2023 31.0.15.3742",
        "",
    ]
)


def test_end_to_end_scenario() -> None:
    text = "Published name: oem1.inf\nProvider name: Acme\n\nPublished name: oem2.inf\nProvider name: Zenith\n"
    records = parse_enum_drivers(text)
    assert records == [
        DriverRecord("oem1.inf", provider="Acme"),
        DriverRecord("oem2.inf", provider="Zenith"),
    ]


def test_parses_current_english_output_with_crlf() -> None:
    records = parse_enum_drivers(ENGLISH_OUTPUT)
    assert [r.published_name for r in records] == ["oem0.inf", "oem1.inf"]
    first = records[0]
    assert first.original_name == "prnms001.inf"
    assert first.provider == "Microsoft"
    assert first.driver_class == "Printers"
    assert first.driver_version == "06/21/2006 10.0.19041.1"
    assert records[1].provider == "NVIDIA"


def test_parses_traditional_chinese_labels() -> None:
    text = "\n".join(
        [
            "發佈名稱:     oem3.inf",
            "原始名稱:     iastorac.inf",
            "提供者名稱:   Intel",
            "類別名稱:     存放控制器",
            "驅動程式版本: 10/01/2020 17.9.1.1009",
        ]
    )
    records = parse_enum_drivers(text)
    assert records == [
        DriverRecord("oem3.inf", "iastorac.inf", "Intel", "存放控制器", "10/01/2020 17.9.1.1009"),
    ]


def test_record_count_matches_boundaries_across_locales() -> None:
    text = "Published name: a.inf\n發佈名稱: b.inf\nPublished Name: c.inf\n"
    records = parse_enum_drivers(text)
    assert [r.published_name for r in records] == ["a.inf", "b.inf", "c.inf"]


def test_value_keeps_colons_after_the_first() -> None:
    records = parse_enum_drivers("Published name: oem9.inf\nDriver Version: 1.0:2.0\n")
    assert records[0].driver_version == "1.0:2.0"


def test_property_before_first_boundary_is_ignored() -> None:
    text = "Provider name: Orphan\nPublished name: oem1.inf\nClass name: Net\n"
    records = parse_enum_drivers(text)
    assert records == [DriverRecord("oem1.inf", driver_class="Net")]


def test_property_attributed_to_most_recent_record_only() -> None:
    text = "Published name: oem1.inf\nPublished name: oem2.inf\nProvider name: Late\n"
    records = parse_enum_drivers(text)
    assert records[0].provider == ""
    assert records[1].provider == "Late"


def test_unrecognized_and_colonless_lines_are_dropped() -> None:
    text = "Published name: oem1.inf\nSigner name: Microsoft\nProvider name without colon\nSome noise\n"
    records = parse_enum_drivers(text)
    assert records == [DriverRecord("oem1.inf")]


def test_duplicate_published_names_are_kept_in_order() -> None:
    text = "Published name: oem1.inf\nProvider name: A\nPublished name: oem1.inf\nProvider name: B\n"
    records = parse_enum_drivers(text)
    assert [(r.published_name, r.provider) for r in records] == [("oem1.inf", "A"), ("oem1.inf", "B")]


def test_parse_is_idempotent() -> None:
    assert parse_enum_drivers(ENGLISH_OUTPUT) == parse_enum_drivers(ENGLISH_OUTPUT)


def test_empty_input_yields_no_records() -> None:
    assert parse_enum_drivers("") == []
    assert parse_enum_drivers("\r\n\r\n   \n") == []


@pytest.mark.parametrize(
    "line",
    ["Published name oem1.inf", "Published name:", "Published name:    ", "發佈名稱"],
)
def test_malformed_boundary_fails_whole_parse(line: str) -> None:
    text = f"Published name: oem0.inf\nProvider name: Fine\n\n{line}\nProvider name: Lost\n"
    with pytest.raises(MalformedBoundaryError) as excinfo:
        parse_enum_drivers(text)
    assert excinfo.value.line_number == 4
    assert excinfo.value.line == line


def test_label_table_lists_every_field() -> None:
    assert set(FIELD_LABELS) == {"PublishedName", "OriginalName", "Provider", "Class", "DriverVersion"}
    assert labels_for(PUBLISHED_NAME)[0] == "Published name"
    assert "發佈名稱" in labels_for(PUBLISHED_NAME)
