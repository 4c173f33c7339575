"""Tests for logging defaults."""

import logging
from decimal import Decimal

import structlog

from splitledger.models.ledger import Recipient, Split, Transaction
from splitledger.services.storage import InMemoryBlobStore
from splitledger.store import LedgerStore


class TestLibraryDefaults:
    """Logging before configure_logging() is called."""

    def test_structlog_routes_to_stdlib(self):
        """Test importing the package replaces structlog's print logger."""
        assert structlog.is_configured()
        assert isinstance(structlog.get_config()["logger_factory"], structlog.stdlib.LoggerFactory)

    def test_package_logger_has_null_handler(self):
        """Test unconfigured hosts see no output from the package."""
        handlers = logging.getLogger("splitledger").handlers
        assert any(isinstance(h, logging.NullHandler) for h in handlers)

    def test_store_without_factory_prints_nothing(self, capsys):
        """Test a directly built store keeps stdout clean."""
        alice = Recipient(name="Alice")
        store = LedgerStore(InMemoryBlobStore())
        store.load()
        store.add_recipient(alice)
        store.add_transaction(Transaction(
            name="Dinner",
            splits=(Split(recipient_id=alice.id, price=Decimal("20")),),
        ))
        store.delete_recipient(alice.id)

        assert capsys.readouterr().out == ""
