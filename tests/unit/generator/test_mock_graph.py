"""Tests for the mock graph builder."""

import pytest

from skelgen.generator.mock_graph import mock_bucket
from skelgen.generator.models import MockSetupKind
from skelgen.lib.errors import MockFinalClassError, MockNotExistsError, MockTargetNotResolvableError
from skelgen.reflection.registry import ClassRegistry


@pytest.fixture
def chain(make_class, make_method):
    """Six interfaces where each next() returns the following one."""
    classes = []
    for index in range(1, 7):
        name = f"App\\Chain\\Link{index}"
        methods = []
        if index < 6:
            methods.append(make_method("next", name, f"App\\Chain\\Link{index + 1}"))
        methods.append(make_method("label", name, "string"))
        classes.append(make_class(name, methods, is_interface=True))
    return classes


@pytest.fixture
def host(make_class):
    """Class standing in for the class under test."""
    return make_class("App\\Service\\Host")


class TestDepthBound:
    """Tests for bounded nested mock expansion."""

    def test_default_depth_expands_four_levels(self, chain, host, make_generator):
        """A chain longer than max depth should register exactly max depth mocks."""
        registry = ClassRegistry([*chain, host])
        mocks = make_generator(registry, "App\\Service\\Host").mocks

        mocks.ensure_mock("App\\Chain\\Link1", host)

        assert sorted(d.target for d in mocks.descriptors) == [f"App\\Chain\\Link{i}" for i in range(1, 5)]
        last = mocks.lookup("App\\Chain\\Link4")
        assert last.depth == 4
        assert last.plans[0].kind is MockSetupKind.VALUE

    def test_custom_depth(self, chain, host, make_generator):
        """max_mock_depth should bound the expansion."""
        registry = ClassRegistry([*chain, host])
        mocks = make_generator(registry, "App\\Service\\Host", max_mock_depth=2).mocks

        mocks.ensure_mock("App\\Chain\\Link1", host)

        assert len(mocks) == 2
        first = mocks.lookup("App\\Chain\\Link1")
        assert first.plans[0].kind is MockSetupKind.NESTED
        assert first.plans[0].nested_method_name == "createChainLink2Mock"


class TestCycles:
    """Tests for self references and back references."""

    def test_own_type_returns_self(self, make_class, make_method, host, make_generator):
        """Methods returning the mocked type should answer with the mock itself."""
        node = make_class(
            "App\\Tree\\Node",
            [
                make_method("getSelf", "App\\Tree\\Node", "App\\Tree\\Node"),
                make_method("withName", "App\\Tree\\Node", "static"),
            ],
        )
        registry = ClassRegistry([node, host])
        mocks = make_generator(registry, "App\\Service\\Host").mocks

        mocks.ensure_mock("App\\Tree\\Node", host)

        assert len(mocks) == 1
        assert [plan.kind for plan in mocks.lookup("App\\Tree\\Node").plans] == [
            MockSetupKind.SELF,
            MockSetupKind.SELF,
        ]

    def test_mutual_reference(self, make_class, make_method, host, make_generator):
        """A -> B -> A should keep the full A descriptor and nest A inside B."""
        a = make_class("App\\Pair\\A", [make_method("getB", "App\\Pair\\A", "App\\Pair\\B")], is_interface=True)
        b = make_class("App\\Pair\\B", [make_method("getA", "App\\Pair\\B", "App\\Pair\\A")], is_interface=True)
        registry = ClassRegistry([a, b, host])
        mocks = make_generator(registry, "App\\Service\\Host").mocks

        mocks.ensure_mock("App\\Pair\\A", host)

        descriptor_a = mocks.lookup("App\\Pair\\A")
        descriptor_b = mocks.lookup("App\\Pair\\B")
        assert not descriptor_a.is_back_reference
        assert descriptor_a.plans[0].nested_key == "App\\Pair\\B"
        assert descriptor_b.plans[0].kind is MockSetupKind.NESTED
        assert descriptor_b.plans[0].nested_method_name == "createPairAMock"

    def test_back_reference_placeholder(self, make_class, make_method, host, make_generator):
        """A type requested by itself should be stored as a placeholder."""
        a = make_class("App\\Pair\\A", [make_method("name", "App\\Pair\\A", "string")], is_interface=True)
        registry = ClassRegistry([a, host])
        mocks = make_generator(registry, "App\\Service\\Host").mocks

        mocks.ensure_mock("App\\Pair\\A", host, requester="App\\Pair\\A")

        descriptor = mocks.lookup("App\\Pair\\A")
        assert descriptor.is_back_reference
        assert descriptor.setup == "$mock"
        assert descriptor.args == {}
        helper = mocks.render_helper(descriptor)
        assert "$mock = \\Mockery::namedMock('Mock\\App\\Pair\\A', \\App\\Pair\\A::class);" in helper
        assert "shouldReceive" not in helper


class TestResolution:
    """Tests for mock target resolution errors."""

    def test_final_class_rejected(self, make_class, make_method, host, make_generator):
        """A final class should not be mocked."""
        money = make_class("App\\Money", [make_method("amount", "App\\Money", "int")], is_final=True)
        mocks = make_generator(ClassRegistry([money, host]), "App\\Service\\Host").mocks

        with pytest.raises(MockFinalClassError) as exc_info:
            mocks.ensure_mock("App\\Money", host, "pay")

        assert exc_info.value.error_code == "MOCK_FINAL_CLASS"

    def test_final_class_with_bypass(self, make_class, make_method, host, make_generator):
        """bypass_finals should allow final classes."""
        money = make_class("App\\Money", [make_method("amount", "App\\Money", "int")], is_final=True)
        mocks = make_generator(ClassRegistry([money, host]), "App\\Service\\Host", bypass_finals=True).mocks

        assert mocks.ensure_mock("App\\Money", host) == "App\\Money"

    def test_unknown_type(self, host, make_generator):
        """An unknown type should raise MockTargetNotResolvableError."""
        mocks = make_generator(ClassRegistry([host]), "App\\Service\\Host").mocks

        with pytest.raises(MockTargetNotResolvableError) as exc_info:
            mocks.ensure_mock("Missing", host, "run")

        assert exc_info.value.context["parent_method"] == "run"

    def test_short_name_resolved_in_host_namespace(self, make_class, host, make_generator):
        """A short name should be qualified with the namespace of the context class."""
        clock = make_class("App\\Service\\Clock", is_interface=True)
        mocks = make_generator(ClassRegistry([clock, host]), "App\\Service\\Host").mocks

        assert mocks.ensure_mock("Clock", host) == "App\\Service\\Clock"

    def test_lookup_missing(self, host, make_generator):
        """lookup should raise for unknown keys."""
        mocks = make_generator(ClassRegistry([host]), "App\\Service\\Host").mocks

        with pytest.raises(MockNotExistsError):
            mocks.lookup("App\\Nope")

    def test_excluded_methods_not_planned(self, make_class, make_method, host, make_generator):
        """Static, magic and excluded methods should not be mocked."""
        from skelgen.lib.config import ExclusionRules

        repo = make_class(
            "App\\Repo",
            [
                make_method("find", "App\\Repo", "string"),
                make_method("count", "App\\Repo", "int"),
                make_method("create", "App\\Repo", "string", is_static=True),
                make_method("__get", "App\\Repo", "mixed"),
            ],
            is_interface=True,
        )
        rules = ExclusionRules(exclude_methods=("count",))
        mocks = make_generator(ClassRegistry([repo, host]), "App\\Service\\Host", rules=rules).mocks

        mocks.ensure_mock("App\\Repo", host)

        assert [plan.name for plan in mocks.lookup("App\\Repo").plans] == ["find"]


class TestMockBucket:
    """Tests for helper trait placement."""

    def test_project_class(self, make_target):
        """Project classes should be grouped by their first two relative segments."""
        bucket = mock_bucket("App\\Domain\\User\\Entity", make_target())

        assert bucket.trait_name == "UserMockHelper"
        assert bucket.namespace == "App\\Tests\\Unit\\Mock\\Domain"
        assert bucket.file_path.parts[-3:] == ("Mock", "Domain", "UserMockHelper.php")

    def test_vendor_class(self, make_target):
        """Classes outside the project namespace should go under Vendor."""
        bucket = mock_bucket("Psr\\Log\\LoggerInterface", make_target())

        assert bucket.full_name == "App\\Tests\\Unit\\Mock\\Vendor\\Psr\\LogMockHelper"

    def test_global_class(self, make_target):
        """Global classes should go under Native."""
        bucket = mock_bucket("DateTimeInterface", make_target())

        assert bucket.full_name == "App\\Tests\\Unit\\Mock\\Vendor\\Native\\DateTimeInterfaceMockHelper"
