"""Tests for core data models, the catalog loader and the relationship resolver."""

from datetime import datetime, timezone

import pytest
import yaml

from mockem.catalog import (
    RelationshipResolver,
    Vocabularies,
    load_catalog,
    load_vocabularies,
    validate_catalog,
)
from mockem.errors import (
    CatalogError,
    DependencyCycleError,
    InvalidSchemaError,
    UnknownCategoryError,
    ValidationError,
)
from mockem.generator import Generator
from mockem.models import (
    Catalog,
    CategoryDefinition,
    ForeignKey,
    GenerationRequest,
    GenerationResult,
    SchemaKind,
)


@pytest.fixture
def catalog():
    return load_catalog()


@pytest.fixture
def vocabularies():
    return load_vocabularies()


@pytest.fixture
def resolver(catalog):
    return RelationshipResolver(catalog)


def _cyclic_catalog():
    return Catalog(
        categories={
            "loop": CategoryDefinition(
                name="loop",
                title="Loop",
                schemas=("companies", "contacts"),
                relationships={
                    "companies": (ForeignKey("contacts", "contact_id"),),
                    "contacts": (ForeignKey("companies", "company_id"),),
                },
            )
        }
    )


class TestCategoryDefinition:
    """Tests for CategoryDefinition."""

    def test_dependencies_of(self, catalog):
        sales = catalog.get_category("sales-crm")

        assert sales.dependencies_of("companies") == ()
        assert sales.dependencies_of("opportunities") == (
            ForeignKey("companies", "company_id"),
            ForeignKey("contacts", "contact_id"),
        )

    def test_serialization(self, catalog):
        sales = catalog.get_category("sales-crm")
        data = sales.to_dict()

        assert data["schemas"] == ["companies", "contacts", "opportunities"]
        assert data["relationships"]["contacts"] == [
            {"schema": "companies", "field": "company_id"}
        ]

        restored = CategoryDefinition.from_dict("sales-crm", data)
        assert restored == sales


class TestCatalog:
    """Tests for the packaged catalog."""

    def test_categories(self, catalog):
        assert set(catalog.categories) == {
            "sales-crm",
            "finance-erp",
            "human-resources",
            "marketing-campaigns",
            "supply-chain",
        }

    def test_every_schema_kind_is_owned(self, catalog):
        owned = [s for c in catalog.categories.values() for s in c.schemas]
        assert sorted(owned) == sorted(SchemaKind.names())

    def test_unknown_category(self, catalog):
        with pytest.raises(UnknownCategoryError) as exc_info:
            catalog.get_category("bogus")

        assert "bogus" in exc_info.value.message

    def test_platforms(self, catalog):
        assert catalog.has_platform("general")
        assert catalog.has_platform("salesforce")
        assert not catalog.has_platform("mainframe")

    def test_round_trip(self, catalog):
        assert Catalog.from_dict(catalog.to_dict()) == catalog


class TestCatalogValidation:
    """Tests for load-time catalog checks."""

    def test_cycle_rejected(self):
        with pytest.raises(DependencyCycleError):
            validate_catalog(_cyclic_catalog())

    def test_unknown_schema_rejected(self):
        catalog = Catalog(
            categories={
                "odd": CategoryDefinition(name="odd", title="Odd", schemas=("widgets",))
            }
        )
        with pytest.raises(CatalogError, match="widgets"):
            validate_catalog(catalog)

    def test_cross_category_relationship_rejected(self):
        catalog = Catalog(
            categories={
                "hr": CategoryDefinition(
                    name="hr",
                    title="HR",
                    schemas=("employees",),
                    relationships={"employees": (ForeignKey("departments", "department_id"),)},
                )
            }
        )
        with pytest.raises(CatalogError, match="departments"):
            validate_catalog(catalog)

    def test_schema_in_two_categories_rejected(self):
        catalog = Catalog(
            categories={
                "a": CategoryDefinition(name="a", title="A", schemas=("vendors",)),
                "b": CategoryDefinition(name="b", title="B", schemas=("vendors",)),
            }
        )
        with pytest.raises(CatalogError, match="vendors"):
            validate_catalog(catalog)

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(yaml.safe_dump({
            "platforms": {"general": "General"},
            "categories": {
                "people": {
                    "title": "People",
                    "schemas": ["departments", "employees"],
                    "relationships": {
                        "employees": [{"schema": "departments", "field": "department_id"}],
                    },
                },
            },
        }))

        catalog = load_catalog(path)

        assert list(catalog.categories) == ["people"]
        assert catalog.get_category("people").dependencies_of("employees") == (
            ForeignKey("departments", "department_id"),
        )

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError, match="not found"):
            load_catalog(tmp_path / "missing.yaml")


class TestVocabularies:
    """Tests for the vocabulary mapping."""

    def test_packaged_lists(self):
        vocabularies = load_vocabularies()

        assert "first_names" in vocabularies
        assert all(len(values) > 0 for values in vocabularies.values())

    def test_unknown_vocabulary(self):
        vocabularies = Vocabularies({"colors": ["red"]})

        with pytest.raises(CatalogError, match="shapes"):
            vocabularies["shapes"]

    def test_empty_list_rejected(self):
        with pytest.raises(CatalogError):
            Vocabularies({"colors": []})


class TestRelationshipResolver:
    """Tests for dependency ordering."""

    def test_parents_first(self, resolver):
        order = resolver.resolve("sales-crm", ["opportunities", "contacts", "companies"])

        assert order == ["companies", "contacts", "opportunities"]

    def test_every_order_respects_dependencies(self, catalog, resolver):
        for name, category in catalog.categories.items():
            requested = list(reversed(category.schemas))
            order = resolver.resolve(name, requested)

            assert sorted(order) == sorted(requested)
            for child in order:
                for fk in category.dependencies_of(child):
                    if fk.schema in order:
                        assert order.index(fk.schema) < order.index(child)

    def test_independent_schemas_keep_requested_order(self, resolver):
        order = resolver.resolve("finance-erp", ["vendors", "accounts", "transactions"])

        assert order == ["vendors", "accounts", "transactions"]

    def test_missing_parent_is_not_a_blocker(self, resolver):
        assert resolver.resolve("supply-chain", ["orders"]) == ["orders"]

    def test_duplicates_collapsed(self, resolver):
        order = resolver.resolve("human-resources", ["employees", "departments", "employees"])

        assert order == ["departments", "employees"]

    def test_unknown_category(self, resolver):
        with pytest.raises(UnknownCategoryError):
            resolver.resolve("bogus", ["companies"])

    def test_schema_outside_category(self, resolver):
        with pytest.raises(InvalidSchemaError) as exc_info:
            resolver.resolve("sales-crm", ["companies", "bogus", "orders"])

        assert exc_info.value.schemas == ["bogus", "orders"]
        assert "bogus" in exc_info.value.message

    def test_empty_request(self, resolver):
        with pytest.raises(ValidationError):
            resolver.resolve("sales-crm", [])

    def test_cycle_raises(self):
        resolver = RelationshipResolver(_cyclic_catalog())

        with pytest.raises(DependencyCycleError) as exc_info:
            resolver.resolve("loop", ["companies", "contacts"])

        assert set(exc_info.value.schemas) == {"companies", "contacts"}


class TestGenerationRequest:
    """Tests for GenerationRequest."""

    def test_comma_separated_schemas(self):
        request = GenerationRequest(
            category="sales-crm", schemas="companies, contacts", row_count=10
        )

        assert request.schemas == ["companies", "contacts"]
        assert request.platform == "general"
        assert request.total_rows == 20

    def test_total_rows_ignores_duplicates(self, catalog, vocabularies):
        request = GenerationRequest(
            category="human-resources",
            schemas=["employees", "departments", "employees"],
            row_count=4,
        )

        result = Generator(catalog, request, vocabularies).generate()

        assert request.total_rows == 8
        assert result.total_rows == request.total_rows


class TestGenerationResult:
    """Tests for GenerationResult."""

    @pytest.fixture
    def result(self):
        rows = [{"id": i + 1, "name": f"Row {i + 1}", "note": None} for i in range(15)]
        return GenerationResult(
            category="sales-crm",
            platform="general",
            order=["companies"],
            data={"companies": rows},
            generated_at=datetime(2024, 1, 15, tzinfo=timezone.utc),
        )

    def test_preview_is_first_ten_rows(self, result):
        preview = result.preview()

        assert len(preview["companies"]) == 10
        assert preview["companies"] == result.data["companies"][:10]
        assert len(result.data["companies"]) == 15

    def test_columns_and_totals(self, result):
        assert result.columns("companies") == ["id", "name", "note"]
        assert result.columns("contacts") == []
        assert result.total_rows == 15

    def test_to_frames(self, result):
        frames = result.to_frames()

        df = frames["companies"]
        assert list(df.columns) == ["id", "name", "note"]
        assert len(df) == 15
        assert df["id"].tolist() == list(range(1, 16))
        assert df["note"].isna().all()
