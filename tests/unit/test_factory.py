"""Unit tests for data source binding in the provider factory."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError

from db_resource_provider.config import Settings
from db_resource_provider.errors import ConfigurationError, ProviderUnavailableError
from db_resource_provider.factory import ResourceProviderFactory
from db_resource_provider.resources import TableResourceData


@pytest.fixture
def factory(settings) -> ResourceProviderFactory:
    factory = ResourceProviderFactory()
    factory.activate(settings)
    yield factory
    factory.deactivate()


class TestActivation:
    def test_activate_reads_settings(self, settings):
        factory = ResourceProviderFactory()
        factory.activate(settings)

        assert factory.datasource_name == "accounts-db"
        assert factory.root_path == "/x/"
        assert factory.strict is False

    def test_missing_datasource_name(self):
        settings = Settings.model_construct(datasource_name="", root_path="/x/")

        with pytest.raises(ConfigurationError):
            ResourceProviderFactory().activate(settings)

    def test_bind_before_activate(self, engine):
        with pytest.raises(ConfigurationError):
            ResourceProviderFactory().bind_data_source("accounts-db", engine)


class TestBinding:
    def test_unbound_factory_has_no_provider(self, factory):
        assert not factory.is_bound
        with pytest.raises(ProviderUnavailableError):
            factory.get_resource_provider()

    def test_bind_matching_data_source(self, factory, engine):
        assert factory.bind_data_source("accounts-db", engine)
        assert factory.is_bound

        provider = factory.get_resource_provider()
        provider.create("/x/accounts/u1", {"name": "Ann"})

        assert provider.get_resource("/x/accounts/u1").get("name") == "Ann"

    def test_other_data_source_names_are_ignored(self, factory, engine):
        assert not factory.bind_data_source("billing-db", engine)
        assert not factory.is_bound

    def test_second_data_source_is_ignored(self, factory, engine, engine_maker):
        factory.bind_data_source("accounts-db", engine)
        factory.get_resource_provider().create("/x/accounts/u1", {})

        assert not factory.bind_data_source("accounts-db", engine_maker())
        assert factory.get_resource_provider().get_resource("/x/accounts/u1") is not None

    def test_bind_failure_leaves_factory_unbound(self, factory):
        engine = MagicMock(spec=Engine)
        engine.connect.side_effect = OperationalError("connect", {}, Exception("refused"))

        assert not factory.bind_data_source("accounts-db", engine)
        assert not factory.is_bound

    def test_unbind(self, factory, engine):
        factory.bind_data_source("accounts-db", engine)
        provider = factory.get_resource_provider()

        factory.unbind_data_source(engine)

        assert not factory.is_bound
        assert not provider.is_live()
        with pytest.raises(ProviderUnavailableError):
            factory.get_resource_provider()

    def test_unbind_unknown_engine_is_ignored(self, factory, engine, engine_maker):
        factory.bind_data_source("accounts-db", engine)

        factory.unbind_data_source(engine_maker())

        assert factory.is_bound

    def test_rebind_switches_database(self, factory, engine, engine_maker):
        factory.bind_data_source("accounts-db", engine)
        factory.get_resource_provider().create("/x/accounts/u1", {})

        replacement = engine_maker()
        assert factory.rebind_data_source("accounts-db", replacement)

        provider = factory.get_resource_provider()
        assert provider.get_resource("/x/accounts/u1") is None
        assert isinstance(provider.get_resource("/x/accounts"), TableResourceData)

    def test_rebind_without_binding_does_nothing(self, factory, engine):
        assert not factory.rebind_data_source("accounts-db", engine)
        assert not factory.is_bound

    def test_deactivate_unbinds(self, settings, engine):
        factory = ResourceProviderFactory()
        factory.activate(settings)
        factory.bind_data_source("accounts-db", engine)

        factory.deactivate()

        assert not factory.is_bound

    def test_strict_setting_reaches_data_factory(self, engine):
        factory = ResourceProviderFactory()
        factory.activate(
            Settings(datasource_name="accounts-db", root_path="/x/", strict_storage_errors=True)
        )
        factory.bind_data_source("accounts-db", engine)

        assert factory.get_resource_provider().data_factory.strict is True
        factory.deactivate()
