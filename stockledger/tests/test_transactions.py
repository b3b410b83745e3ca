"""
Tests for the ledger transaction boundary.
"""

import pytest
from django.db import OperationalError

from stockledger import ConcurrencyConflict
from stockledger.models import Product
from stockledger.services.transactions import is_conflict, ledger_transaction


class _DriverError(Exception):
    """Stands in for the DB-API exception Django wraps."""


def _db_error(message='', sqlstate=None, sqlite_errorname=None):
    exc = OperationalError(message)
    cause = _DriverError(message)
    cause.pgcode = sqlstate
    if sqlite_errorname:
        cause.sqlite_errorname = sqlite_errorname
    exc.__cause__ = cause
    return exc


class TestIsConflict:
    """Which database errors are retried."""

    @pytest.mark.parametrize('sqlstate', ['40001', '40P01', '55P03', '57014'])
    def test_postgres_conflicts(self, sqlstate):
        assert is_conflict(_db_error('conflict', sqlstate))

    def test_sqlite_lock(self):
        assert is_conflict(_db_error('database is locked'))

    def test_sqlite_table_lock(self):
        """Shared-cache table locks surface as a different message."""
        assert is_conflict(_db_error('database table is locked: stockledger_balance'))

    @pytest.mark.parametrize('errorname', ['SQLITE_BUSY', 'SQLITE_LOCKED'])
    def test_sqlite_error_names(self, errorname):
        assert is_conflict(_db_error('locked', sqlite_errorname=errorname))

    def test_other_errors(self):
        assert not is_conflict(_db_error('no such table: foo'))
        assert not is_conflict(_db_error('syntax error', '42601'))
        assert not is_conflict(_db_error('constraint failed', sqlite_errorname='SQLITE_CONSTRAINT'))


@pytest.mark.django_db(transaction=True)
class TestLedgerTransaction:
    """Retry behaviour at the outermost atomic block."""

    def test_retries_then_succeeds(self, settings):
        settings.STOCKLEDGER = {'CONFLICT_RETRIES': 2}
        calls = []

        @ledger_transaction
        def flaky():
            calls.append(1)
            if len(calls) < 3:
                raise _db_error('database is locked')
            return 'ok'

        assert flaky() == 'ok'
        assert len(calls) == 3

    def test_gives_up_with_concurrency_conflict(self, settings):
        settings.STOCKLEDGER = {'CONFLICT_RETRIES': 1}
        calls = []

        @ledger_transaction
        def always_locked():
            calls.append(1)
            raise _db_error('deadlock', '40P01')

        with pytest.raises(ConcurrencyConflict) as exc:
            always_locked()

        assert exc.value.code == 'CONCURRENCY_CONFLICT'
        assert exc.value.data['attempts'] == 2
        assert len(calls) == 2

    def test_non_conflict_errors_propagate(self):
        calls = []

        @ledger_transaction
        def broken():
            calls.append(1)
            raise _db_error('no such table: foo')

        with pytest.raises(OperationalError):
            broken()

        assert len(calls) == 1

    def test_failed_attempt_is_rolled_back(self, settings):
        settings.STOCKLEDGER = {'CONFLICT_RETRIES': 1}
        calls = []

        @ledger_transaction
        def create_then_fail():
            calls.append(1)
            Product.objects.create(
                sku=f'SKU-{len(calls)}', model_name='Tee', color='Black', size='M', retail_price=1,
            )
            if len(calls) == 1:
                raise _db_error('database is locked')

        create_then_fail()

        assert list(Product.objects.values_list('sku', flat=True)) == ['SKU-2']
