"""End-to-end scenarios for the accounts tree over SQLite."""

from concurrent.futures import ThreadPoolExecutor

from db_resource_provider.facade import ResourceDataFactory
from db_resource_provider.resources import RecordResourceData, TableResourceData

ROOT = "/x/"
WORKERS = 4
RECORD_COUNT = 20


def put(data_factory: ResourceDataFactory, userid: str, **properties) -> None:
    path = f"/x/accounts/{userid}"
    data_factory.put(path, RecordResourceData(path=path, properties=properties))


def test_empty_table(data_factory):
    resource = data_factory.get("/x/accounts")

    assert isinstance(resource, TableResourceData)
    assert resource.properties["tableName"] == "ACCOUNTS"
    assert data_factory.list_children("/x/accounts") == []


def test_put_then_get(data_factory):
    put(data_factory, "u1", name="Ann", email="a@x.com", balance=10)

    resource = data_factory.get("/x/accounts/u1")

    assert isinstance(resource, RecordResourceData)
    assert resource.properties == {
        "userid": "u1",
        "name": "Ann",
        "email": "a@x.com",
        "balance": 10,
    }


def test_put_without_fields_stores_defaults(data_factory):
    put(data_factory, "u1")

    assert data_factory.get("/x/accounts/u1").properties == {
        "userid": "u1",
        "name": "[no name]",
        "email": "[no email]",
        "balance": 0,
    }


def test_put_absent_deletes(data_factory):
    put(data_factory, "u1", name="Ann")

    data_factory.put("/x/accounts/u1", None)

    assert data_factory.get("/x/accounts/u1") is None


def test_unsupported_table_is_absent(data_factory):
    put(data_factory, "u1")

    assert data_factory.get("/x/other/u1") is None


def test_repeated_put_overwrites(data_factory):
    put(data_factory, "u1", name="Ann", balance=10)
    put(data_factory, "u1", name="Ann", balance=25)

    assert data_factory.get("/x/accounts/u1").get("balance") == 25  # noqa: PLR2004
    assert data_factory.list_children("/x/accounts") == ["/x/accounts/u1"]


def test_children_match_readable_rows(data_factory):
    for userid in ("u1", "u2", "u3"):
        put(data_factory, userid)
    data_factory.put("/x/accounts/u2", None)

    children = data_factory.list_children("/x/accounts")

    assert sorted(children) == ["/x/accounts/u1", "/x/accounts/u3"]
    assert len(children) == len(set(children))
    assert all(data_factory.get(child) is not None for child in children)
    assert all(data_factory.list_children(child) == [] for child in children)


def test_rows_survive_a_new_factory_on_the_same_database(connection):
    put(ResourceDataFactory(connection, ROOT), "u1", name="Ann")

    reopened = ResourceDataFactory(connection, ROOT)

    assert reopened.get("/x/accounts/u1").get("name") == "Ann"


def test_concurrent_puts_share_one_connection(data_factory):
    userids = [f"u{i}" for i in range(RECORD_COUNT)]

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        list(pool.map(lambda userid: put(data_factory, userid, balance=1), userids))

    children = data_factory.list_children("/x/accounts")
    assert sorted(children) == sorted(f"/x/accounts/{userid}" for userid in userids)
