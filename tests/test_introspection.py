"""
Unit tests for the Introspection Module

Tests:
- Module loader: path resolution, loading, failures
- Type provider: candidate discovery, property shapes, validations, bases
"""

import sys
from dataclasses import dataclass, field
from datetime import date
from typing import Annotated, ClassVar, FrozenSet, List, Optional, Sequence, Tuple

import pytest

from pocometa import generate
from pocometa.errors import ModuleLoadError, UnresolvedAnnotationError
from pocometa.introspection import (
    DataclassIntrospectionProvider,
    PropertyKind,
    RawProperty,
    is_model_class,
    load_module,
    resolve_module_path,
)
from pocometa.introspection.type_provider import NO_DEFAULT
from pocometa.validator import EmailAddress, MaxLength, Range, Required


# ============================================================================
# SAMPLE TYPES
# ============================================================================


@dataclass
class Tag:
    TagID: int
    Label: str = ""


@dataclass
class Article:
    ArticleID: int
    Title: Annotated[str, Required(), MaxLength(120)]
    Published: Optional[date] = None
    Rating: Annotated[Optional[float], Range(0, 5)] = None
    Tags: List[Tag] = field(default_factory=list)
    Keywords: Tuple[str, ...] = ()
    Pair: Tuple[int, int] = (0, 0)
    Related: Sequence["Article"] = ()
    Labels: FrozenSet[str] = frozenset()
    Author: Optional["Tag"] = None
    Contact: Optional[str] = field(default=None, metadata={"validators": [EmailAddress()]})
    registry: ClassVar[dict] = {}
    _internal: int = 0


@dataclass
class Shelf:
    ShelfID: int
    Tag: Optional[Tag] = None


@dataclass
class Crate:
    CrateID: int
    Owner: Optional["Nowhere"] = None


class Plain:
    Code: str = "X"
    Count: int

    @property
    def upper(self) -> str:
        return self.Code.upper()


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def provider():
    """Dataclass introspection provider"""
    return DataclassIntrospectionProvider()


@pytest.fixture
def article_properties(provider):
    """Properties of Article keyed by name"""
    return {p.name: p for p in provider.properties_of(Article)}


# ============================================================================
# MODULE LOADER TESTS
# ============================================================================


class TestModuleLoader:
    """Test module path resolution and loading"""

    def test_resolve_appends_extension(self, tmp_path):
        """Test that .py is appended when missing"""
        assert resolve_module_path(tmp_path / "models") == tmp_path / "models.py"
        assert resolve_module_path(tmp_path / "models.txt") == tmp_path / "models.txt.py"

    def test_resolve_keeps_extension(self, tmp_path):
        """Test that a .py path is left alone"""
        assert resolve_module_path(tmp_path / "models.py") == tmp_path / "models.py"

    def test_load_fixture_module(self, fixtures_dir):
        """Test loading a module file registers it under its stem"""
        module = load_module(fixtures_dir / "keyless.py")

        assert module.__name__ == "keyless"
        assert sys.modules["keyless"] is module
        assert hasattr(module, "Product")

    def test_load_without_extension(self, fixtures_dir):
        """Test loading a module given without its extension"""
        module = load_module(str(fixtures_dir / "keyless"))
        assert module.__name__ == "keyless"

    def test_reload_is_allowed(self, fixtures_dir):
        """Test that a module loaded twice is executed again"""
        first = load_module(fixtures_dir / "keyless.py")
        second = load_module(fixtures_dir / "keyless.py")

        assert first is not second
        assert sys.modules["keyless"] is second

    def test_missing_file(self, tmp_path):
        """Test that a missing file is a load error"""
        with pytest.raises(ModuleLoadError) as exc_info:
            load_module(tmp_path / "absent.py")

        assert "file not found" in str(exc_info.value)
        assert exc_info.value.path.endswith("absent.py")

    def test_broken_module(self, tmp_path):
        """Test that a module failing to import is a load error"""
        broken = tmp_path / "broken_model.py"
        broken.write_text("class Broken(:\n    pass\n", encoding="utf-8")

        with pytest.raises(ModuleLoadError) as exc_info:
            load_module(broken)

        assert "SyntaxError" in exc_info.value.reason
        assert "broken_model" not in sys.modules

    def test_runtime_error_in_module(self, tmp_path):
        """Test that an exception raised while executing is a load error"""
        failing = tmp_path / "failing_model.py"
        failing.write_text("raise RuntimeError('boom')\n", encoding="utf-8")

        with pytest.raises(ModuleLoadError, match="boom"):
            load_module(failing)

    def test_refuses_to_shadow_imported_module(self, tmp_path):
        """Test that a file named like an imported module is rejected"""
        shadow = tmp_path / "os.py"
        shadow.write_text("X = 1\n", encoding="utf-8")

        with pytest.raises(ModuleLoadError, match="already used"):
            load_module(shadow)

        assert not hasattr(sys.modules["os"], "X")


# ============================================================================
# TYPE DISCOVERY TESTS
# ============================================================================


class TestTypeDiscovery:
    """Test candidate type discovery"""

    def test_is_model_class(self):
        """Test which classes can describe types"""
        assert is_model_class(Article)
        assert is_model_class(Plain)
        assert not is_model_class(PropertyKind)
        assert not is_model_class(ValueError)
        assert not is_model_class(int)
        assert not is_model_class(List[Tag])
        assert not is_model_class("Article")

    def test_list_types_in_definition_order(self, provider, load_fixture):
        """Test that types come in definition order, without enums or imports"""
        module = load_fixture("northwind")
        names = [cls.__name__ for cls in provider.list_types(module)]

        assert names == [
            "Address",
            "Category",
            "Customer",
            "Employee",
            "Product",
            "Order",
            "OrderDetail",
        ]

    def test_list_types_includes_abstract_interface(self, provider, load_fixture):
        """Test that abstract classes are candidates"""
        module = load_fixture("shipping")
        names = [cls.__name__ for cls in provider.list_types(module)]

        assert names == ["IShipper", "Shipper", "Shipment"]

    def test_base_of(self, provider, load_fixture):
        """Test nearest candidate base lookup"""
        module = load_fixture("parties")

        assert provider.base_of(module.Company) is module.Party
        assert provider.base_of(module.Party) is None
        assert provider.base_of(module.Invoice) is module.Audited


# ============================================================================
# PROPERTY TESTS
# ============================================================================


class TestProperties:
    """Test property shapes reported by the provider"""

    def test_declared_order_and_skipped_names(self, article_properties):
        """Test that ClassVar and private names are skipped"""
        assert list(article_properties) == [
            "ArticleID",
            "Title",
            "Published",
            "Rating",
            "Tags",
            "Keywords",
            "Pair",
            "Related",
            "Labels",
            "Author",
            "Contact",
        ]

    def test_scalar_property(self, article_properties):
        """Test a plain scalar property"""
        prop = article_properties["ArticleID"]

        assert prop.kind == PropertyKind.SCALAR
        assert prop.element_type is int
        assert not prop.is_nullable
        assert not prop.is_collection
        assert not prop.has_default
        assert prop.default is NO_DEFAULT

    def test_optional_property(self, article_properties):
        """Test that Optional marks the property nullable"""
        prop = article_properties["Published"]

        assert prop.is_nullable
        assert prop.element_type is date
        assert prop.has_default
        assert prop.default is None

    def test_annotated_validations(self, article_properties):
        """Test validations declared through Annotated"""
        assert article_properties["Title"].validations == [Required(), MaxLength(120)]
        assert article_properties["Title"].element_type is str

    def test_annotated_optional(self, article_properties):
        """Test Annotated wrapping Optional"""
        prop = article_properties["Rating"]

        assert prop.is_nullable
        assert prop.element_type is float
        assert prop.validations == [Range(0, 5)]

    def test_field_metadata_validations(self, provider, article_properties):
        """Test validations declared through field metadata"""
        prop = article_properties["Contact"]
        assert provider.validation_declarations_of(prop) == [EmailAddress()]

    def test_collection_of_references(self, article_properties):
        """Test a list of model classes"""
        prop = article_properties["Tags"]

        assert prop.is_collection
        assert prop.kind == PropertyKind.REFERENCE
        assert prop.element_type is Tag

    def test_homogeneous_tuple_is_collection(self, article_properties):
        """Test tuple[X, ...] is a collection but tuple[X, Y] is not"""
        assert article_properties["Keywords"].is_collection
        assert article_properties["Keywords"].element_type is str
        assert not article_properties["Pair"].is_collection
        assert article_properties["Pair"].kind == PropertyKind.UNKNOWN

    def test_forward_references(self, article_properties):
        """Test that string annotations are resolved"""
        assert article_properties["Related"].is_collection
        assert article_properties["Related"].element_type is Article
        assert article_properties["Author"].element_type is Tag
        assert article_properties["Author"].is_nullable

    def test_frozenset_collection(self, article_properties):
        """Test abstract and frozen set collections"""
        prop = article_properties["Labels"]

        assert prop.is_collection
        assert prop.kind == PropertyKind.SCALAR

    def test_enum_property(self, provider, load_fixture):
        """Test that enum properties are classified as enums"""
        module = load_fixture("northwind")
        props = {p.name: p for p in provider.properties_of(module.Order)}

        assert props["Status"].kind == PropertyKind.ENUM
        assert props["Status"].default is module.OrderStatus.NEW

    def test_plain_class_defaults(self, provider):
        """Test defaults of a class that is not a dataclass"""
        props = {p.name: p for p in provider.properties_of(Plain)}

        assert list(props) == ["Code", "Count"]
        assert props["Code"].default == "X"
        assert not props["Count"].has_default

    def test_declared_only(self, provider, load_fixture):
        """Test that inherited properties belong to the base type"""
        module = load_fixture("parties")
        names = [p.name for p in provider.properties_of(module.Company)]

        assert names == ["TaxNumber"]

    def test_invoice_skips_class_variables(self, provider, load_fixture):
        """Test ClassVar and private fields on a derived type"""
        module = load_fixture("parties")
        names = [p.name for p in provider.properties_of(module.Invoice)]

        assert names == ["InvoiceID", "Total"]

    def test_no_default_sentinel(self):
        """Test a property built without a default reports none"""
        prop = RawProperty(name="Code", owner=Plain, annotation=str, element_type=str)

        assert prop.default is NO_DEFAULT
        assert not prop.has_default


# ============================================================================
# ANNOTATION ERROR TESTS
# ============================================================================


class TestAnnotationErrors:
    """Test annotations that cannot describe a property"""

    def test_property_named_after_its_type(self, provider):
        """Test an annotation shadowed by its own default is reported"""
        with pytest.raises(UnresolvedAnnotationError) as exc_info:
            provider.properties_of(Shelf)

        assert exc_info.value.type_name == "Shelf"
        assert exc_info.value.property_name == "Tag"
        assert "quote the type name" in str(exc_info.value)

    def test_unresolvable_forward_reference(self, provider):
        """Test a forward reference to an unknown name is reported"""
        with pytest.raises(UnresolvedAnnotationError) as exc_info:
            provider.properties_of(Crate)

        assert exc_info.value.type_name == "Crate"
        assert "Nowhere" in exc_info.value.reason

    def test_quoted_name_resolves(self, provider, load_fixture):
        """Test a quoted annotation named like its property resolves"""
        module = load_fixture("northwind")
        props = {p.name: p for p in provider.properties_of(module.Product)}

        assert props["Category"].kind == PropertyKind.REFERENCE
        assert props["Category"].element_type is module.Category
        assert props["Category"].is_nullable

    def test_model_with_shadowed_annotation(self, tmp_path):
        """Test generation stops on a shadowed annotation in a model file"""
        model_file = tmp_path / "shadowed_model.py"
        model_file.write_text(
            "from dataclasses import dataclass\n"
            "from typing import Optional\n\n\n"
            "@dataclass\n"
            "class Customer:\n"
            "    CustomerID: int\n\n\n"
            "@dataclass\n"
            "class Order:\n"
            "    OrderID: int\n"
            "    CustomerID: Optional[int] = None\n"
            "    Customer: Optional[Customer] = None\n",
            encoding="utf-8",
        )

        with pytest.raises(UnresolvedAnnotationError, match="Order.Customer"):
            generate(model_file)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
