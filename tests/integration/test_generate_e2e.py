"""End-to-end generation over the PHP fixtures."""

from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from phpts.errors import EntityNotFoundError
from phpts.generator import Generator
from phpts.resolver import SourceIndex
from phpts.writer import write_typescript_files

FIXTURES = Path(__file__).parent.parent / "fixtures"


@pytest.fixture
def generator():
    return Generator.for_base_dir(FIXTURES, namespace_prefix="App")


def test_simple_dto(generator):
    output = generator.generate_one("App\\Dto\\SimpleDTO")

    assert output == (
        "/**\n"
        " * Simple user data transfer object\n"
        " */\n"
        "export interface SimpleDTO {\n"
        "  name: string;\n"
        "  age: number;\n"
        "  balance: number;\n"
        "  isActive: boolean;\n"
        "  email: string | null;\n"
        "}\n"
    )


def test_nested_dto_closure(generator):
    result = generator.generate_closure("App\\Dto\\UserDTO")

    assert list(result) == ["UserDTO", "AddressDTO"]
    assert result["UserDTO"] == (
        "import { AddressDTO } from './AddressDTO';\n"
        "\n"
        "/**\n"
        " * User with nested address\n"
        " */\n"
        "export interface UserDTO {\n"
        "  id: string;\n"
        "  username: string;\n"
        "  address: AddressDTO;\n"
        "  billingAddress: AddressDTO | null;\n"
        "}\n"
    )
    assert "  country: string | null;\n" in result["AddressDTO"]


def test_deeply_nested_closure(generator):
    result = generator.generate_closure("App\\Dto\\UserWithFullAddressDTO")

    assert list(result) == ["UserWithFullAddressDTO", "AddressWithCityDTO", "CityDTO"]
    assert "import { CityDTO } from './CityDTO';" in result["AddressWithCityDTO"]


def test_enum_and_dates(generator):
    result = generator.generate_closure("App\\Dto\\UserWithStatusDTO")

    assert list(result) == ["UserWithStatusDTO", "UserStatus"]
    assert "  status: UserStatus;\n" in result["UserWithStatusDTO"]
    assert "  createdAt: string;\n" in result["UserWithStatusDTO"]
    assert "  updatedAt: string | null;\n" in result["UserWithStatusDTO"]
    assert "DateTimeImmutable" not in result["UserWithStatusDTO"]
    assert result["UserStatus"] == (
        "/**\n"
        " * User status enum\n"
        " */\n"
        "export enum UserStatus {\n"
        "  ACTIVE = 'active',\n"
        "  INACTIVE = 'inactive',\n"
        "  SUSPENDED = 'suspended',\n"
        "  DELETED = 'deleted',\n"
        "}\n"
    )


def test_int_backed_enum(generator):
    output = generator.generate_one("App\\Dto\\PriorityEnum")

    assert "  LOW = 1,\n" in output
    assert "  CRITICAL = 4,\n" in output


def test_collections(generator):
    result = generator.generate_closure("App\\Dto\\CollectionDTO")

    output = result["CollectionDTO"]
    assert "  tags: string[];\n" in output
    assert "  addresses: AddressDTO[];\n" in output
    assert "  metadata: any[];\n" in output
    assert "  scores: number[] | null;\n" in output
    assert "AddressDTO" in result


def test_shaped_and_generic_arrays(generator):
    result = generator.generate_closure("App\\Dto\\ShapedArrayDTO")

    output = result["ShapedArrayDTO"]
    assert "  summary: { id: number; name?: string };\n" in output
    assert "  scores: Record<string, number>;\n" in output
    assert "  addresses: AddressDTO[];\n" in output
    assert "  nested: { user: { id: number; name: string }; meta: { created: string } };\n" in output
    assert list(result) == ["ShapedArrayDTO", "AddressDTO"]


def test_self_referencing_class(generator):
    result = generator.generate_closure("App\\Dto\\TreeNodeDTO")

    assert list(result) == ["TreeNodeDTO"]
    assert "import" not in result["TreeNodeDTO"]
    assert "  parent: TreeNodeDTO | null;\n" in result["TreeNodeDTO"]
    assert "  children: TreeNodeDTO[];\n" in result["TreeNodeDTO"]


def test_excluded_field_and_unresolved_dependency(generator):
    result = generator.generate_closure("App\\Dto\\OrderDTO")

    assert list(result) == ["OrderDTO", "PriorityEnum"]
    assert "internalState" not in result["OrderDTO"]
    assert "  items: ExternalItemDTO[];\n" in result["OrderDTO"]
    assert result.unresolved == ["ExternalItemDTO"]


def test_missing_root(generator):
    with pytest.raises(EntityNotFoundError):
        generator.generate_closure("App\\Dto\\MissingDTO")


def test_index_over_directory_and_write():
    index = SourceIndex()
    index.add_path(FIXTURES / "Dto")
    result = Generator(index).generate_closure("App\\Dto\\UserDTO")

    with TemporaryDirectory() as tmpdir:
        written = write_typescript_files(tmpdir, result)

        assert sorted(path.name for path in written) == ["AddressDTO.ts", "UserDTO.ts"]
        assert (Path(tmpdir) / "UserDTO.ts").read_text().startswith("import { AddressDTO }")
