"""Tests for the collection codec and decode-error policies."""

import json
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from splitledger.models.ledger import (
    Recipient,
    Transaction,
    TransactionNotification,
)
from splitledger.services.storage import (
    DecodeError,
    DecodeResult,
    empty_collection,
    raise_decode_error,
    recipients_codec,
    transactions_codec,
)


class TestEncoding:
    """Tests for the persisted wire format."""

    def test_transaction_field_names(self, dinner):
        """Test camelCase field names on the wire."""
        payload = json.loads(transactions_codec().encode([dinner]))
        record = payload[0]
        assert set(record) == {"id", "name", "note", "notification", "splits", "extraPrices"}
        assert set(record["splits"][0]) == {"id", "recipientId", "price"}
        assert set(record["extraPrices"]) == {"tax", "tip"}
        assert record["notification"] is None

    def test_encoding_is_utf8_json(self):
        """Test non-ASCII names survive."""
        data = recipients_codec().encode([Recipient(name="Zoë")])
        assert isinstance(data, bytes)
        assert json.loads(data.decode("utf-8"))[0]["name"] == "Zoë"

    def test_recipient_field_names(self):
        """Test recipient wire fields and ISO timestamps."""
        recipient = Recipient(name="Alice", date_added=datetime(2024, 11, 16, 9, 0, tzinfo=timezone.utc))
        record = json.loads(recipients_codec().encode([recipient]))[0]
        assert set(record) == {"id", "name", "dateAdded"}
        assert record["id"] == str(recipient.id)
        assert record["dateAdded"].startswith("2024-11-16T09:00:00")

    def test_notification_time_is_iso(self, dinner):
        """Test reminder time is an ISO-8601 string."""
        time = datetime(2030, 5, 1, 12, 0, tzinfo=timezone.utc)
        with_reminder = dinner.model_copy(update={
            "notification": TransactionNotification(name="Payment Reminder for Dinner", time=time),
        })
        record = json.loads(transactions_codec().encode([with_reminder]))[0]
        assert record["notification"]["name"] == "Payment Reminder for Dinner"
        assert datetime.fromisoformat(record["notification"]["time"].replace("Z", "+00:00")) == time

    def test_amounts_keep_their_value(self, dinner):
        """Test prices decode back to the exact Decimal."""
        record = json.loads(transactions_codec().encode([dinner]))[0]
        assert Decimal(str(record["splits"][0]["price"])) == Decimal("20.00")


class TestDecoding:
    """Tests for decode results."""

    def test_round_trip(self, dinner):
        """Test decode(encode(x)) == x field-for-field."""
        codec = transactions_codec()
        result = codec.decode(codec.encode([dinner]))
        assert result.ok
        assert result.value == [dinner]

    def test_empty_collection_round_trip(self):
        """Test an empty collection encodes and decodes."""
        codec = recipients_codec()
        result = codec.decode(codec.encode([]))
        assert result.ok
        assert result.value == []

    def test_garbage_bytes_fail(self):
        """Test arbitrary bytes produce a DecodeError, not an exception."""
        result = transactions_codec().decode(b"\x00\xff not json")
        assert not result.ok
        assert isinstance(result.error, DecodeError)
        assert result.error.key == "saved_transactions"

    def test_schema_mismatch_fails(self):
        """Test valid JSON of the wrong shape fails."""
        result = recipients_codec().decode(b'{"id": "not-a-list"}')
        assert not result.ok
        assert result.error.key == "recipients"

    def test_legacy_record_decodes(self):
        """Test numeric amounts, a missing note and the nil sentinel."""
        recipient_id = uuid4()
        legacy = [{
            "id": str(uuid4()).upper(),
            "name": "Groceries",
            "notification": None,
            "splits": [
                {"id": str(uuid4()), "recipientId": str(recipient_id).upper(), "price": 12.5},
                {"id": str(uuid4()), "recipientId": "00000000-0000-0000-0000-000000000000", "price": 7},
            ],
            "extraPrices": {"tax": 1.25, "tip": 0},
        }]
        result = transactions_codec().decode(json.dumps(legacy).encode("utf-8"))
        assert result.ok
        transaction = result.value[0]
        assert transaction.note == ""
        assert transaction.splits[0].recipient_id == recipient_id
        assert transaction.splits[1].recipient_id is None
        assert transaction.total_amount == Decimal("20.75")

    def test_legacy_numeric_dates(self):
        """Test numeric timestamps count from 2001-01-01, not the Unix epoch."""
        recipients = [{"id": str(uuid4()), "name": "Alice", "dateAdded": 753436800.5}]
        result = recipients_codec().decode(json.dumps(recipients).encode("utf-8"))
        assert result.ok
        assert result.value[0].date_added == datetime(
            2024, 11, 16, 8, 0, 0, 500000, tzinfo=timezone.utc
        )

        transactions = [{
            "id": str(uuid4()),
            "name": "Rent",
            "notification": {"name": "Payment Reminder for Rent", "time": 0},
            "splits": [],
            "extraPrices": {"tax": 0, "tip": 0},
        }]
        decoded = transactions_codec().decode(json.dumps(transactions).encode("utf-8"))
        assert decoded.value[0].notification.time == datetime(2001, 1, 1, tzinfo=timezone.utc)

    def test_negative_tax_in_blob_fails(self):
        """Test schema constraints apply on decode."""
        bad = [{"id": str(uuid4()), "name": "x", "splits": [], "extraPrices": {"tax": -1, "tip": 0}}]
        result = transactions_codec().decode(json.dumps(bad).encode("utf-8"))
        assert not result.ok


class TestDecodePolicies:
    """Tests for the explicit fail-open / fail-loud policies."""

    def test_empty_collection_policy(self):
        """Test the fail-open policy yields an empty list."""
        result = DecodeResult(error=DecodeError("recipients", "boom"))
        assert result.unwrap_or_else(empty_collection) == []

    def test_raise_policy(self):
        """Test the fail-loud policy re-raises."""
        result = DecodeResult(error=DecodeError("recipients", "boom"))
        with pytest.raises(DecodeError, match="recipients"):
            result.unwrap_or_else(raise_decode_error)

    def test_policy_not_consulted_on_success(self):
        """Test a successful result ignores the policy."""
        recipient = Recipient(name="Alice")
        result = DecodeResult(value=[recipient])
        assert result.unwrap_or_else(raise_decode_error) == [recipient]

    def test_custom_policy(self):
        """Test any callable can serve as a policy."""
        seen = []

        def remember(error: DecodeError) -> list:
            seen.append(error.reason)
            return []

        transactions_codec().decode(b"[{").unwrap_or_else(remember)
        assert len(seen) == 1


def test_transaction_type_survives(dinner):
    """Test decoded items are Transaction models."""
    codec = transactions_codec()
    decoded = codec.decode(codec.encode([dinner])).value
    assert isinstance(decoded[0], Transaction)
