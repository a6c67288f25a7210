"""Tests for collecting binding names from typeshare output."""

from __future__ import annotations

from conftest import BINDINGS_TS

from rpc_stub_generator.bindings import BindingCatalog, get_bindings


class TestGetBindings:
    """Test extraction of exported declarations from a bindings file."""

    def test_interfaces_and_types(self):
        names = get_bindings(BINDINGS_TS)
        assert names[0] == "Patient"
        assert "TaskFilter" in names
        assert names[-1] == "ClientError"
        assert len(names) == 9

    def test_non_exported_declarations_are_ignored(self):
        content = "interface Hidden {\n}\ntype Alias = string;\nexport interface Shown {\n}\n"
        assert get_bindings(content) == ["Shown"]

    def test_empty_file(self):
        assert get_bindings("") == []

    def test_generic_declarations_are_not_matched(self):
        # Only `export type Name =` and `export interface Name {` are declarations
        assert get_bindings("export type Wrapper<T> = { data: T };") == []


class TestBindingCatalog:
    """Test the deduplicated binding catalog."""

    def test_duplicates_are_dropped(self):
        catalog = BindingCatalog.from_names(["Patient", "Task", "Patient", "Task", "Note"])
        assert catalog.names == ("Patient", "Task", "Note")
        assert len(catalog) == 3

    def test_deduplication_is_idempotent_across_files(self):
        first = get_bindings(BINDINGS_TS)
        catalog = BindingCatalog.from_names(first + first)
        assert catalog == BindingCatalog.from_names(first)
        assert all(catalog.names.count(name) == 1 for name in first)

    def test_contains(self):
        catalog = BindingCatalog.from_names(["Patient"])
        assert "Patient" in catalog
        assert "Task" not in catalog

    def test_knows_builtin_and_preamble_types(self):
        catalog = BindingCatalog()
        assert catalog.knows_type("null")
        assert catalog.knows_type("string")
        assert catalog.knows_type("ParamsIded")
        assert not catalog.knows_type("Patient")

    def test_knows_single_level_generic_arguments(self):
        catalog = BindingCatalog.from_names(["Patient", "PatientForCreate"])
        assert catalog.knows_type("Patient")
        assert catalog.knows_type("ParamsForCreate<PatientForCreate>")
        assert catalog.knows_type("Array<Patient>")
        assert catalog.knows_type("Array<string>")
        assert not catalog.knows_type("Array<Doctor>")
